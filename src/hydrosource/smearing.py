"""src/hydrosource/smearing.py

Gaussian smearing kernels in (τ, x, y, η_s) used to spread point-like and
string-like emitters over the hydro grid.

Kernel shapes (no factor 2 in the exponent):
  w_τ   = exp(-Δτ^2/σ_τ^2) / τ_emitter
  w_⊥   = exp(-(Δx^2+Δy^2)/σ_x^2)
  w_η   = exp(-Δη^2/σ_η^2)                     (partons)
  w_η   = 1 inside [η_L, η_R], Gaussian tails  (strings)

Normalisations 1/(√π σ_τ), 1/(π σ_x^2), 1/(√π σ_η) are exposed as
prefactors so the caller can apply them once to a summed result.
"""

from __future__ import annotations

import numpy as np
from dataclasses import dataclass


def gaussian(d: np.ndarray, sigma: float) -> np.ndarray:
    return np.exp(-(d * d) / (sigma * sigma))


def plateau_gaussian(eta: float, left: np.ndarray, right: np.ndarray, sigma: float) -> np.ndarray:
    """Flat (w=1) for left ≤ η ≤ right and Gaussian tails beyond."""
    d = np.maximum(left - eta, 0.0) + np.maximum(eta - right, 0.0)
    return gaussian(d, sigma)


def interpolate_rapidity(eta: float, left: np.ndarray, right: np.ndarray,
                         y_l: np.ndarray, y_r: np.ndarray) -> np.ndarray:
    """Linear map of η from [left, right] onto [y_l, y_r].

    Not clipped: in the Gaussian tails the line is extrapolated. A zero-width
    interval maps to y_l.
    """
    width = right - left
    safe = np.where(width > 0.0, width, 1.0)
    slope = np.where(width > 0.0, (y_r - y_l) / safe, 0.0)
    return y_l + slope * (eta - left)


@dataclass(frozen=True)
class SmearingKernel:
    """Widths and the n·σ box cutoff shared by every emitter kind."""
    sigma_tau: float = 0.1
    sigma_x: float = 0.5
    sigma_eta: float = 0.5
    n_sigma_skip: float = 5.0

    @classmethod
    def from_config(cls, cfg) -> "SmearingKernel":
        return cls(sigma_tau=cfg.sigma_tau, sigma_x=cfg.sigma_x,
                   sigma_eta=cfg.sigma_eta, n_sigma_skip=cfg.n_sigma_skip)

    # ---- cutoffs ----

    @property
    def reach_tau(self) -> float:
        return self.n_sigma_skip * self.sigma_tau

    @property
    def reach_x(self) -> float:
        return self.n_sigma_skip * self.sigma_x

    @property
    def reach_eta(self) -> float:
        return self.n_sigma_skip * self.sigma_eta

    def all_in_past(self, tau: float, tau_max: float) -> bool:
        """True once every emitter is more than n·σ_τ behind τ."""
        return tau - tau_max >= self.reach_tau

    def select_box(self, tau: float, x: float, y: float,
                   tau_c: np.ndarray, x_c: np.ndarray, y_c: np.ndarray) -> np.ndarray:
        """Indices of emitters inside the τ, x, y windows.

        The windows are applied one after the other so each test only runs on
        the survivors of the previous one.
        """
        idx = np.flatnonzero(np.abs(tau - tau_c) <= self.reach_tau)
        if len(idx):
            idx = idx[np.abs(x - x_c[idx]) <= self.reach_x]
        if len(idx):
            idx = idx[np.abs(y - y_c[idx]) <= self.reach_x]
        return idx

    # ---- weights ----

    def tau_weight(self, tau: float, tau_c: np.ndarray) -> np.ndarray:
        return gaussian(tau - tau_c, self.sigma_tau) / tau_c

    def transverse_weight(self, dx: np.ndarray, dy: np.ndarray) -> np.ndarray:
        return np.exp(-(dx * dx + dy * dy) / (self.sigma_x * self.sigma_x))

    def eta_weight(self, d_eta: np.ndarray) -> np.ndarray:
        return gaussian(d_eta, self.sigma_eta)

    # ---- normalisations ----

    @property
    def prefactor_tau(self) -> float:
        return 1.0 / (np.sqrt(np.pi) * self.sigma_tau)

    @property
    def prefactor_perp(self) -> float:
        return 1.0 / (np.pi * self.sigma_x * self.sigma_x)

    @property
    def prefactor_eta(self) -> float:
        return 1.0 / (np.sqrt(np.pi) * self.sigma_eta)
