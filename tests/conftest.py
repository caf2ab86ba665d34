"""
Pytest configuration and shared fixtures.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from hydrosource import HydroSource, PartonSources, PartonTable, SourceConfig, StringSources, StringTable


STRINGS_HEADER = "# norm delta_E tau_form x_perp y_perp eta_s_left eta_s_right y_l y_r\n"
PARTONS_HEADER = "# tau x y eta_s rapidity\n"


def make_partons(n=1, **cols) -> PartonTable:
    """PartonTable with every column defaulting to zero (tau, baryon_number to one)."""
    base = {name: np.zeros(n) for name in
            ("x", "y", "eta_s", "rapidity", "mass", "px", "py", "E")}
    base["tau"] = np.ones(n)
    base["baryon_number"] = np.ones(n)
    for k, v in cols.items():
        base[k] = np.atleast_1d(np.asarray(v, dtype=float))
    return PartonTable(**base)


def make_strings(**cols) -> StringTable:
    base = {"norm": [1.0], "delta_E": [1.0], "tau_form": [0.5], "x_perp": [0.0], "y_perp": [0.0],
            "eta_s_left": [0.0], "eta_s_right": [0.0], "y_l": [0.0], "y_r": [0.0]}
    base.update({k: np.atleast_1d(v) for k, v in cols.items()})
    return StringTable(**base)


@pytest.fixture
def strings_file(tmp_path):
    path = tmp_path / "strings.dat"
    path.write_text(STRINGS_HEADER + "1.0 2.5 0.7 0.1 -0.2 -1.0 1.0 -2.0 2.0\n")
    return path


@pytest.fixture
def partons_file(tmp_path):
    path = tmp_path / "partons.dat"
    path.write_text(PARTONS_HEADER + "0.6 0.0 0.0 0.0 0.3\n0.8 1.0 -1.0 0.5 1.2\n")
    return path


@pytest.fixture
def ampt_file(tmp_path):
    path = tmp_path / "ampt.dat"
    path.write_text(
        "3\n"
        "2.0 0.5 -0.5 1.0 2.0 0.5 0.5 1.0\n"   # kept
        "1.0 0.0 0.0 2.0 1.0 0.0 0.0 0.0\n"    # t <= z
        "1.0 0.0 0.0 0.0 1.0 0.0 0.0 1.0\n"    # massless, dropped
    )
    return path


@pytest.fixture
def ampt_config():
    return SourceConfig(initial_profile="ampt")


@pytest.fixture
def resting_parton_source(ampt_config):
    """One parton at rest at the origin, appearing at tau = 1 fm."""
    partons = make_partons(tau=1.0, mass=1.0, E=1.0)
    return HydroSource(ampt_config, sources=PartonSources(partons=partons, tau_max=1.0))


@pytest.fixture
def point_string_source():
    """One string collapsed to eta_s = 0 with zero rapidity, formed at tau = 0.5 fm."""
    cfg = SourceConfig(initial_profile="strings")
    sources = StringSources(strings=make_strings(), partons=make_partons(0), tau_max=0.5)
    return HydroSource(cfg, sources=sources)
