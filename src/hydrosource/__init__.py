"""Hydrodynamic source terms from QCD strings and partons.

Small package that turns the emitter lists of an initial-state model into
Gaussian-smeared energy-momentum J^μ(τ, x, y, η_s) and net-baryon ρ_B source
densities for a (3+1)D hydro code:

- QCD strings (MC-Glauber-LEXUS) with companion baryon partons
- AMPT partons read from lab-frame (t, x, y, z, E, p) lists
- causal pre-integration of the sources for the initial condition

All lengths and times are in fm, energies in GeV unless stated otherwise.
"""

from .config import SourceConfig
from .emitters import PartonTable, SourceFileError, StringTable
from .source import HydroSource, PartonSources, StringSources

__version__ = "0.1.0"

__all__ = [
    "HydroSource",
    "PartonSources",
    "PartonTable",
    "SourceConfig",
    "SourceFileError",
    "StringSources",
    "StringTable",
]
