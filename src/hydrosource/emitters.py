"""src/hydrosource/emitters.py

Emitter store: column-wise tables of QCD strings and partons, and the readers
that build them from the upstream model output.

Input formats (whitespace separated, first line is a header):
- QCD strings:  norm delta_E tau_form x_perp y_perp eta_s_left eta_s_right y_l y_r
- partons (string-model companion):  tau x y eta_s rapidity
- AMPT partons: first line holds the parton count, then  t x y z E px py pz

Rows that cannot be decoded are dropped, and so are strings whose
rapidity intervals are reversed (right < left). For AMPT input this also drops
partons outside the forward light cone or with E^2 - p^2 <= 0; a fraction of
raw AMPT entries is always spacelike, so none of this is an error.

A missing input file is fatal (`SourceFileError`): evaluating with an empty
source would silently produce zero deposition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Iterable, Optional

import numpy as np

from .physics import (
    inside_forward_light_cone,
    mass_squared,
    momentum_rapidity,
    proper_time,
    spacetime_rapidity,
)

logger = logging.getLogger(__name__)

STRING_COLUMNS = ("norm", "delta_E", "tau_form", "x_perp", "y_perp",
                  "eta_s_left", "eta_s_right", "y_l", "y_r")
PARTON_COLUMNS = ("tau", "x", "y", "eta_s", "rapidity")
AMPT_COLUMNS = ("t", "x", "y", "z", "E", "px", "py", "pz")


class SourceFileError(FileNotFoundError):
    """A required emitter list could not be opened (missing, a directory, unreadable)."""


def _frozen(a) -> np.ndarray:
    a = np.array(a, dtype=float)
    a.flags.writeable = False
    return a


class _Table:
    """Frozen dataclass of equally long float columns."""

    def __post_init__(self):
        n = None
        for f in fields(self):
            col = _frozen(getattr(self, f.name))
            if n is None:
                n = len(col)
            elif len(col) != n:
                raise ValueError(f"{type(self).__name__}: column '{f.name}' has length {len(col)} != {n}.")
            object.__setattr__(self, f.name, col)

    def __len__(self) -> int:
        return len(getattr(self, fields(self)[0].name))


@dataclass(frozen=True, eq=False)
class StringTable(_Table):
    """QCD string segments. eta_s_right >= eta_s_left, y_r >= y_l, tau_form > 0."""
    norm: np.ndarray
    delta_E: np.ndarray
    tau_form: np.ndarray
    x_perp: np.ndarray
    y_perp: np.ndarray
    eta_s_left: np.ndarray
    eta_s_right: np.ndarray
    y_l: np.ndarray
    y_r: np.ndarray

    @classmethod
    def empty(cls) -> "StringTable":
        return cls(*([np.empty(0)] * len(STRING_COLUMNS)))


@dataclass(frozen=True, eq=False)
class PartonTable(_Table):
    """Point-like partons.

    Kinematic columns (mass, px, py, E) are zero for string-model partons.
    Each parton counts as one unit in the baryon channel.
    """
    tau: np.ndarray
    x: np.ndarray
    y: np.ndarray
    eta_s: np.ndarray
    rapidity: np.ndarray
    mass: np.ndarray
    px: np.ndarray
    py: np.ndarray
    E: np.ndarray
    baryon_number: np.ndarray

    @classmethod
    def empty(cls) -> "PartonTable":
        return cls(*([np.empty(0)] * 10))


# -------------------------
# parsing helpers
# -------------------------

def _open_lines(path, what: str) -> list[str]:
    path = Path(path)
    try:
        # undecodable bytes become U+FFFD and the row fails float() in _parse_rows
        with path.open("r", errors="replace") as fh:
            return fh.readlines()
    except OSError as exc:
        logger.error("can not open %s file: %s", what, path)
        raise SourceFileError(f"can not open {what} file: {path}") from exc


def _parse_rows(lines: Iterable[str], ncols: int) -> tuple[np.ndarray, int]:
    """Decode the first `ncols` floats of each line. Returns (rows, n_dropped)."""
    rows = []
    n_bad = 0
    for line in lines:
        tok = line.split()
        if not tok:
            continue
        if len(tok) < ncols:
            n_bad += 1
            continue
        try:
            rows.append([float(v) for v in tok[:ncols]])
        except ValueError:
            n_bad += 1
    if not rows:
        return np.empty((0, ncols)), n_bad
    data = np.asarray(rows, dtype=float)
    finite = np.all(np.isfinite(data), axis=1)
    n_bad += int((~finite).sum())
    return data[finite], n_bad


def _max_or_zero(a: np.ndarray) -> float:
    return float(a.max()) if len(a) else 0.0


# -------------------------
# readers
# -------------------------

def read_qcd_strings(path) -> tuple[StringTable, float]:
    """Read a QCD string list. Returns (strings, tau_max)."""
    lines = _open_lines(path, "QCD strings")
    data, n_bad = _parse_rows(lines[1:], len(STRING_COLUMNS))

    keep = (
        (data[:, 2] > 0.0)            # tau_form
        & (data[:, 6] >= data[:, 5])  # eta_s_right >= eta_s_left
        & (data[:, 8] >= data[:, 7])  # y_r >= y_l
    )
    n_bad += int((~keep).sum())
    data = data[keep]

    strings = StringTable(*data.T) if len(data) else StringTable.empty()
    tau_max = _max_or_zero(strings.tau_form)
    logger.info("read %d QCD strings from %s (%d rows dropped)", len(strings), path, n_bad)
    logger.info("hydro_source: tau_max = %g fm", tau_max)
    return strings, tau_max


def read_string_partons(path) -> PartonTable:
    """Read the baryon partons that accompany a QCD string list.

    Every parton carries baryon number 1. The appearance times do not enter
    tau_max; the string formation times bound the source in this model.
    """
    lines = _open_lines(path, "parton list")
    data, n_bad = _parse_rows(lines[1:], len(PARTON_COLUMNS))

    keep = data[:, 0] > 0.0  # tau
    n_bad += int((~keep).sum())
    data = data[keep]

    n = len(data)
    zeros = np.zeros(n)
    if n:
        tau, x, y, eta_s, rapidity = data.T
    else:
        tau = x = y = eta_s = rapidity = zeros
    partons = PartonTable(tau=tau, x=x, y=y, eta_s=eta_s, rapidity=rapidity,
                          mass=zeros, px=zeros, py=zeros, E=zeros,
                          baryon_number=np.ones(n))
    logger.info("read %d baryon partons from %s (%d rows dropped)", n, path, n_bad)
    return partons


def partons_from_light_cone(data: np.ndarray) -> PartonTable:
    """Build partons from lab-frame rows (t, x, y, z, E, px, py, pz).

    Rows outside the forward light cone or with non-positive mass^2 are
    dropped.
    """
    data = np.asarray(data, dtype=float).reshape(-1, len(AMPT_COLUMNS))
    t, x, y, z, E, px, py, pz = data.T
    m2 = mass_squared(E, px, py, pz)
    keep = inside_forward_light_cone(t, z) & (m2 > 0.0)

    t, x, y, z, E, px, py, pz, m2 = (a[keep] for a in (t, x, y, z, E, px, py, pz, m2))
    return PartonTable(
        tau=proper_time(t, z),
        x=x,
        y=y,
        eta_s=spacetime_rapidity(t, z),
        rapidity=momentum_rapidity(E, pz),
        mass=np.sqrt(m2),
        px=px,
        py=py,
        E=E,
        baryon_number=np.ones(len(t)),
    )


def read_ampt_partons(path) -> tuple[PartonTable, float]:
    """Read an AMPT parton list. Returns (partons, tau_max)."""
    lines = _open_lines(path, "AMPT")

    n_declared: Optional[int] = None
    if lines:
        head = lines[0].split()
        try:
            n_declared = int(head[0]) if head else None
        except ValueError:
            n_declared = None

    data, _ = _parse_rows(lines[1:], len(AMPT_COLUMNS))
    partons = partons_from_light_cone(data)
    tau_max = _max_or_zero(partons.tau)
    logger.info("hydro_source: read in %d/%s partons from %s",
                len(partons), n_declared if n_declared is not None else "?", path)
    logger.info("hydro_source: tau_max = %g fm", tau_max)
    return partons, tau_max
