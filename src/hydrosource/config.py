"""src/hydrosource/config.py

Construction-time parameters of the hydro source terms.

The hydro code owns the full parameter file; this module only holds the
handful of values the source evaluator needs. `SourceConfig.from_mapping`
accepts the parameter names used by the hydro input files (`Initial_profile`,
`initName`, `sFactor`, ...) so a parsed parameter dict can be passed through
unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional

from .physics import HBARC

ProfileKind = Literal["strings", "ampt"]

# Integer selectors used by the hydro parameter files.
PROFILE_CODES = {
    12: "strings",  # MC-Glauber-LEXUS strings + baryon partons
    30: "ampt",     # AMPT partons
}

_MAPPING_KEYS = {
    "initName": "strings_file",
    "initName_rhob": "partons_file",
    "initName_AMPT": "ampt_file",
    "delta_x": "delta_x",
    "delta_y": "delta_y",
    "delta_eta": "delta_eta",
    "sFactor": "s_factor",
    "hbarc": "hbarc",
    "delta_tau": "delta_tau",
    "string_dump_mode": "string_dump_mode",
}


def profile_kind(selector) -> ProfileKind:
    """Normalise an initial-profile selector (12, 30, "strings", "ampt")."""
    if isinstance(selector, str):
        s = selector.strip().lower()
        if s in ("strings", "ampt"):
            return s  # type: ignore[return-value]
        if s.isdigit():
            selector = int(s)
    if isinstance(selector, int) and selector in PROFILE_CODES:
        return PROFILE_CODES[selector]  # type: ignore[return-value]
    raise ValueError(
        f"Unsupported initial profile {selector!r}. "
        f"Use one of {sorted(PROFILE_CODES)} or 'strings'/'ampt'."
    )


@dataclass(frozen=True)
class SourceConfig:
    """Everything `HydroSource` needs at construction time.

    Smearing widths are in fm (σ_η dimensionless). Zero or negative widths
    would divide by zero in the kernel normalisations and are rejected.
    """
    initial_profile: ProfileKind

    strings_file: Optional[str] = None
    partons_file: Optional[str] = None
    ampt_file: Optional[str] = None

    # grid cell
    delta_x: float = 0.1
    delta_y: float = 0.1
    delta_eta: float = 0.1
    delta_tau: float = 0.02

    # energy scale
    s_factor: float = 1.0
    hbarc: float = HBARC

    string_dump_mode: int = 1

    # smearing
    sigma_tau: float = 0.1
    sigma_x: float = 0.5
    sigma_eta: float = 0.5
    n_sigma_skip: float = 5.0

    def __post_init__(self):
        object.__setattr__(self, "initial_profile", profile_kind(self.initial_profile))

        for name in ("sigma_tau", "sigma_x", "sigma_eta"):
            if not getattr(self, name) > 0.0:
                raise ValueError(f"{name} must be > 0 (got {getattr(self, name)}).")
        if not self.n_sigma_skip > 0.0:
            raise ValueError(f"n_sigma_skip must be > 0 (got {self.n_sigma_skip}).")
        if not self.delta_tau > 0.0:
            raise ValueError(f"delta_tau must be > 0 (got {self.delta_tau}).")
        if not self.hbarc > 0.0:
            raise ValueError(f"hbarc must be > 0 (got {self.hbarc}).")

    @property
    def volume(self) -> float:
        """Cell volume Δx Δy Δη_s."""
        return self.delta_x * self.delta_y * self.delta_eta

    @property
    def energy_norm(self) -> float:
        """s_factor / ħc, converts GeV to fm^-1."""
        return self.s_factor / self.hbarc

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any], **overrides) -> "SourceConfig":
        """Build from a hydro-style parameter dict (unknown keys are ignored)."""
        kw: dict = {"initial_profile": params.get("Initial_profile", params.get("initial_profile"))}
        for key, field in _MAPPING_KEYS.items():
            if key in params:
                kw[field] = params[key]
            elif field in params:
                kw[field] = params[field]
        for field in ("sigma_tau", "sigma_x", "sigma_eta", "n_sigma_skip"):
            if field in params:
                kw[field] = params[field]
        kw.update(overrides)

        for field in ("delta_x", "delta_y", "delta_eta", "delta_tau", "s_factor", "hbarc",
                      "sigma_tau", "sigma_x", "sigma_eta", "n_sigma_skip"):
            if field in kw:
                kw[field] = float(kw[field])
        if "string_dump_mode" in kw:
            kw["string_dump_mode"] = int(kw["string_dump_mode"])
        return cls(**kw)
