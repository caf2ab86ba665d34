"""Tests for SourceConfig."""

import pytest

from hydrosource.config import SourceConfig, profile_kind
from hydrosource.physics import HBARC


class TestProfileKind:

    @pytest.mark.parametrize("selector, kind", [
        (12, "strings"), (30, "ampt"), ("12", "strings"), ("AMPT", "ampt"), ("strings", "strings"),
    ])
    def test_accepted_selectors(self, selector, kind):
        assert profile_kind(selector) == kind

    @pytest.mark.parametrize("selector", [1, 13, "glauber", None])
    def test_rejected_selectors(self, selector):
        with pytest.raises(ValueError):
            profile_kind(selector)


class TestSourceConfig:

    def test_defaults(self):
        cfg = SourceConfig(initial_profile=30)
        assert cfg.initial_profile == "ampt"
        assert cfg.sigma_tau == 0.1
        assert cfg.sigma_x == 0.5
        assert cfg.sigma_eta == 0.5
        assert cfg.n_sigma_skip == 5.0
        assert cfg.hbarc == HBARC
        assert cfg.energy_norm == pytest.approx(1.0 / HBARC)

    @pytest.mark.parametrize("field", ["sigma_tau", "sigma_x", "sigma_eta"])
    def test_zero_width_rejected(self, field):
        with pytest.raises(ValueError, match=field):
            SourceConfig(initial_profile="ampt", **{field: 0.0})

    def test_bad_delta_tau_rejected(self):
        with pytest.raises(ValueError):
            SourceConfig(initial_profile="ampt", delta_tau=0.0)

    def test_frozen(self):
        cfg = SourceConfig(initial_profile="ampt")
        with pytest.raises(AttributeError):
            cfg.sigma_x = 1.0

    def test_volume(self):
        cfg = SourceConfig(initial_profile="ampt", delta_x=0.2, delta_y=0.1, delta_eta=0.5)
        assert cfg.volume == pytest.approx(0.01)

    def test_from_hydro_parameter_names(self):
        params = {
            "Initial_profile": "12",
            "initName": "strings.dat",
            "initName_rhob": "partons.dat",
            "initName_AMPT": "ampt.dat",
            "delta_x": "0.05",
            "delta_y": 0.05,
            "delta_eta": 0.1,
            "sFactor": "2.5",
            "delta_tau": 0.01,
            "string_dump_mode": "2",
            "Lambda_something_else": 4,
        }
        cfg = SourceConfig.from_mapping(params)
        assert cfg.initial_profile == "strings"
        assert cfg.strings_file == "strings.dat"
        assert cfg.partons_file == "partons.dat"
        assert cfg.ampt_file == "ampt.dat"
        assert cfg.delta_x == 0.05
        assert cfg.s_factor == 2.5
        assert cfg.delta_tau == 0.01
        assert cfg.string_dump_mode == 2

    def test_from_mapping_overrides(self):
        cfg = SourceConfig.from_mapping({"Initial_profile": 30}, sigma_x=0.4)
        assert cfg.sigma_x == 0.4
