"""src/hydrosource/source.py

Energy-momentum and baryon source terms for the hydro evolution.

Two mutually exclusive source models:
- `StringSources`: QCD strings deposit energy along a rapidity interval
  (plateau in η_s with Gaussian tails); companion partons carry baryon number.
- `PartonSources`: AMPT partons, each a Gaussian blob in (τ, x, y, η_s)
  carrying its own four-momentum.

`HydroSource` owns the active model and exposes the calls the hydro solver
makes at every cell:
- j^μ(τ, x, y, η_s)    [fm^-4 after s_factor/ħc]
- ρ_B(τ, x, y, η_s)    [fm^-4]
- their causal pre-integrated versions for the initial condition.

Emitter tables are read-only, so evaluation is safe from many threads at once.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from .config import SourceConfig
from .emitters import (
    PartonTable,
    StringTable,
    read_ampt_partons,
    read_qcd_strings,
    read_string_partons,
)
from .integrate import integrate_before_tau
from .physics import transverse_mass
from .smearing import SmearingKernel, interpolate_rapidity, plateau_gaussian

logger = logging.getLogger(__name__)


def _parton_smear(partons: PartonTable, eta_c: np.ndarray, kernel: SmearingKernel,
                  tau: float, x: float, y: float, eta_s: float):
    """Surviving parton indices and their unnormalised weights f = w_τ w_⊥ w_η."""
    idx = kernel.select_box(tau, x, y, partons.tau, partons.x, partons.y)
    if len(idx):
        idx = idx[np.abs(eta_s - eta_c[idx]) <= kernel.reach_eta]
    if not len(idx):
        return idx, np.empty(0)

    f = (kernel.tau_weight(tau, partons.tau[idx])
         * kernel.transverse_weight(x - partons.x[idx], y - partons.y[idx])
         * kernel.eta_weight(eta_s - eta_c[idx]))
    return idx, f


@dataclass(frozen=True, eq=False)
class StringSources:
    """QCD strings plus the partons carrying their baryon number.

    string_dump_mode == 2: the string list's y_l / y_r also delimit the η_s
    interval, and baryon partons are centred at their momentum rapidity.
    """
    strings: StringTable
    partons: PartonTable
    tau_max: float
    string_dump_mode: int = 1

    @property
    def n_emitters(self) -> int:
        return len(self.strings)

    def _eta_interval(self):
        s = self.strings
        if self.string_dump_mode == 2:
            return s.y_l, s.y_r
        return s.eta_s_left, s.eta_s_right

    def energy_current(self, tau, x, y, eta_s, kernel: SmearingKernel, energy_norm: float) -> np.ndarray:
        s = self.strings
        left, right = self._eta_interval()

        idx = kernel.select_box(tau, x, y, s.tau_form, s.x_perp, s.y_perp)
        if len(idx):
            idx = idx[(eta_s >= left[idx] - kernel.reach_eta) & (eta_s <= right[idx] + kernel.reach_eta)]
        j = np.zeros(4)
        if not len(idx):
            return j

        left, right = left[idx], right[idx]
        e_local = (kernel.tau_weight(tau, s.tau_form[idx])
                   * kernel.transverse_weight(x - s.x_perp[idx], y - s.y_perp[idx])
                   * plateau_gaussian(eta_s, left, right, kernel.sigma_eta)
                   * energy_norm)
        dy = interpolate_rapidity(eta_s, left, right, s.y_l[idx], s.y_r[idx]) - eta_s

        # longitudinal deposition only: j^x = j^y = 0
        j[0] = np.sum(np.cosh(dy) * e_local)
        j[3] = np.sum(np.sinh(dy) * e_local)
        return j * (kernel.prefactor_tau * kernel.prefactor_perp)

    def baryon_density(self, tau, x, y, eta_s, kernel: SmearingKernel) -> float:
        p = self.partons
        eta_c = p.rapidity if self.string_dump_mode == 2 else p.eta_s
        idx, f = _parton_smear(p, eta_c, kernel, tau, x, y, eta_s)
        res = float(np.sum(p.baryon_number[idx] * f))
        return res * kernel.prefactor_tau * kernel.prefactor_perp * kernel.prefactor_eta


@dataclass(frozen=True, eq=False)
class PartonSources:
    """AMPT partons; each one is both an energy and a baryon source."""
    partons: PartonTable
    tau_max: float

    @property
    def n_emitters(self) -> int:
        return len(self.partons)

    def energy_current(self, tau, x, y, eta_s, kernel: SmearingKernel, energy_norm: float) -> np.ndarray:
        p = self.partons
        idx, f = _parton_smear(p, p.eta_s, kernel, tau, x, y, eta_s)
        j = np.zeros(4)
        if not len(idx):
            return j

        m_perp = transverse_mass(p.mass[idx], p.px[idx], p.py[idx])
        dy = p.rapidity[idx] - eta_s
        j[0] = np.sum(m_perp * np.cosh(dy) * f)
        j[1] = np.sum(p.px[idx] * f)
        j[2] = np.sum(p.py[idx] * f)
        j[3] = np.sum(m_perp * np.sinh(dy) * f)
        return j * (energy_norm * kernel.prefactor_tau * kernel.prefactor_perp * kernel.prefactor_eta)

    def baryon_density(self, tau, x, y, eta_s, kernel: SmearingKernel) -> float:
        p = self.partons
        idx, f = _parton_smear(p, p.eta_s, kernel, tau, x, y, eta_s)
        res = float(np.sum(p.baryon_number[idx] * f))
        return res * kernel.prefactor_tau * kernel.prefactor_perp * kernel.prefactor_eta


Sources = Union[StringSources, PartonSources]


def load_sources(cfg: SourceConfig) -> Sources:
    """Read the emitter lists selected by `cfg.initial_profile`."""
    if cfg.initial_profile == "strings":
        if not (cfg.strings_file and cfg.partons_file):
            raise ValueError("strings profile needs strings_file and partons_file.")
        logger.info("read in QCD strings list from %s and partons list from %s",
                    cfg.strings_file, cfg.partons_file)
        strings, tau_max = read_qcd_strings(cfg.strings_file)
        partons = read_string_partons(cfg.partons_file)
        return StringSources(strings=strings, partons=partons, tau_max=tau_max,
                             string_dump_mode=cfg.string_dump_mode)
    if cfg.initial_profile == "ampt":
        if not cfg.ampt_file:
            raise ValueError("ampt profile needs ampt_file.")
        partons, tau_max = read_ampt_partons(cfg.ampt_file)
        return PartonSources(partons=partons, tau_max=tau_max)
    raise ValueError(f"Unknown initial profile '{cfg.initial_profile}'.")


class HydroSource:
    """Source terms J^μ and ρ_B evaluated on demand at grid points."""

    def __init__(self, cfg: SourceConfig, *, sources: Optional[Sources] = None):
        self.cfg = cfg
        self.kernel = SmearingKernel.from_config(cfg)
        self.sources = sources if sources is not None else load_sources(cfg)
        if getattr(self.sources, "string_dump_mode", cfg.string_dump_mode) != cfg.string_dump_mode:
            raise ValueError(
                f"string_dump_mode mismatch: config has {cfg.string_dump_mode}, "
                f"sources have {self.sources.string_dump_mode}."
            )
        self.volume = cfg.volume

    @property
    def tau_max(self) -> float:
        """Latest formation / appearance time over all emitters [fm]."""
        return self.sources.tau_max

    # ---- instantaneous sources ----

    def evaluate_current(self, tau: float, x: float, y: float, eta_s: float,
                         u_mu: Optional[np.ndarray] = None) -> np.ndarray:
        """Energy-momentum source j^μ = (j^τ, j^x, j^y, j^η) at one point.

        `u_mu` is the local flow; the deposited four-momentum does not depend
        on it.
        """
        if self.kernel.all_in_past(tau, self.tau_max):
            return np.zeros(4)
        return self.sources.energy_current(tau, x, y, eta_s, self.kernel, self.cfg.energy_norm)

    def evaluate_baryon_density(self, tau: float, x: float, y: float, eta_s: float) -> float:
        """Net-baryon source density at one point."""
        if self.kernel.all_in_past(tau, self.tau_max):
            return 0.0
        return self.sources.baryon_density(tau, x, y, eta_s, self.kernel)

    # ---- pre-integrated sources ----

    def evaluate_current_before(self, tau: float, x: float, y: float, eta_s: float) -> np.ndarray:
        """j^μ integrated over [0, τ] with Milne weight, divided by τ."""
        u_rest = np.array([1.0, 0.0, 0.0, 0.0])
        return integrate_before_tau(
            lambda t: self.evaluate_current(t, x, y, eta_s, u_rest),
            tau, self.cfg.delta_tau, shape=(4,),
        )

    def evaluate_baryon_before(self, tau: float, x: float, y: float, eta_s: float) -> float:
        return integrate_before_tau(
            lambda t: self.evaluate_baryon_density(t, x, y, eta_s),
            tau, self.cfg.delta_tau,
        )

    # ---- transverse slices ----

    def evaluate_current_on_grid(self, tau: float, x: np.ndarray, y: np.ndarray, eta_s: float,
                                 *, max_workers: Optional[int] = None,
                                 before: bool = False) -> np.ndarray:
        """j^μ on the (y, x) mesh at fixed τ, η_s. Shape (ny, nx, 4).

        With `before=True` the pre-integrated source is evaluated instead.
        """
        x = np.asarray(x, dtype=float)
        point = self.evaluate_current_before if before else self.evaluate_current

        def row(yj):
            return np.stack([point(tau, xi, yj, eta_s) for xi in x])

        return np.stack(self._map_rows(row, y, max_workers))

    def evaluate_baryon_on_grid(self, tau: float, x: np.ndarray, y: np.ndarray, eta_s: float,
                                *, max_workers: Optional[int] = None,
                                before: bool = False) -> np.ndarray:
        """ρ_B on the (y, x) mesh at fixed τ, η_s. Shape (ny, nx)."""
        x = np.asarray(x, dtype=float)
        point = self.evaluate_baryon_before if before else self.evaluate_baryon_density

        def row(yj):
            return np.array([point(tau, xi, yj, eta_s) for xi in x])

        return np.stack(self._map_rows(row, y, max_workers))

    @staticmethod
    def _map_rows(row, y, max_workers):
        y = np.asarray(y, dtype=float)
        if max_workers is None or max_workers <= 1:
            return [row(yj) for yj in y]
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="HydroSource") as pool:
            return list(pool.map(row, y))
