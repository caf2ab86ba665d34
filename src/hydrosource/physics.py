"""src/hydrosource/physics.py

Small, stable kinematics utilities shared by the readers and the evaluator.
Keep this file boring and well-tested.

Conventions:
- length / time: fm
- energy / momentum: GeV
- Milne coordinates (τ, x, y, η_s)
"""

from __future__ import annotations

import numpy as np

# --- constants ---
HBARC = 0.19733  # GeV fm

# Regulator used in the η_s denominator so t == z does not blow up.
ETA_S_EPS = 1e-15


def proper_time(t: np.ndarray, z: np.ndarray) -> np.ndarray:
    """τ = sqrt(t^2 - z^2). Only meaningful inside the forward light cone."""
    return np.sqrt(t * t - z * z)


def spacetime_rapidity(t: np.ndarray, z: np.ndarray) -> np.ndarray:
    r"""$$\eta_s = \frac{1}{2}\ln\frac{t+z}{t-z}$$ (regularised)."""
    return 0.5 * np.log((t + z) / (t - z + ETA_S_EPS))


def momentum_rapidity(E: np.ndarray, pz: np.ndarray) -> np.ndarray:
    r"""$$y = \frac{1}{2}\ln\frac{E+p_z}{E-p_z}.$$"""
    return 0.5 * np.log((E + pz) / (E - pz))


def mass_squared(E, px, py, pz):
    return E * E - px * px - py * py - pz * pz


def transverse_mass(mass: np.ndarray, px: np.ndarray, py: np.ndarray) -> np.ndarray:
    """m_T = sqrt(m^2 + p_T^2)."""
    return np.sqrt(mass * mass + px * px + py * py)


def inside_forward_light_cone(t: np.ndarray, z: np.ndarray) -> np.ndarray:
    """Boolean mask for t > |z| (timelike, future-pointing)."""
    t = np.asarray(t)
    return (t > np.asarray(z)) & (t > -np.asarray(z))
