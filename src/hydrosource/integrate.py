"""src/hydrosource/integrate.py

Causal pre-integration of an instantaneous source over proper time.

  J(τ) = (1/τ) Σ_i τ_i f(τ_i) Δτ,   τ_i = τ0 + (i + 1/2) Δτ,  i < int((τ-τ0)/Δτ)

The factor τ_i is the Milne volume element. Used once to fold everything
deposited before the start of the hydro evolution into the initial condition.
"""

from __future__ import annotations

from typing import Callable

import numpy as np


def integrate_before_tau(
    func: Callable[[float], np.ndarray],
    tau: float,
    dtau: float,
    *,
    tau0: float = 0.0,
    shape: tuple = (),
):
    """Midpoint-rule integral of `func` from `tau0` to `tau`, divided by `tau`.

    `shape` is the shape of one sample (() for a scalar density, (4,) for j^μ).
    Scalars come back as float, everything else as an ndarray.
    """
    acc = np.zeros(shape, dtype=float)
    if tau <= 0.0:
        return float(acc) if shape == () else acc

    n_steps = int((tau - tau0) / dtau)
    for i in range(n_steps):
        tau_i = tau0 + (i + 0.5) * dtau
        acc += tau_i * np.asarray(func(tau_i), dtype=float) * dtau
    acc /= tau
    return float(acc) if shape == () else acc
