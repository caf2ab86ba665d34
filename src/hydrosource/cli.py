"""src/hydrosource/cli.py

Command-line driver: load an emitter list and inspect the source terms.

  hydrosource summary strings --strings-file strings.dat --partons-file partons.dat
  hydrosource slice ampt --ampt-file ampt.dat --tau 0.4 --output j_tau.npy --png j_tau.png
"""

import logging
from pathlib import Path
from typing import Optional

import numpy as np
import typer
from rich import print
from rich.console import Console
from rich.logging import RichHandler

from .config import SourceConfig
from .emitters import SourceFileError
from .source import HydroSource

app = typer.Typer(help="Hydro source terms from QCD strings or AMPT partons")
err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def _load(profile: str, strings_file, partons_file, ampt_file, string_dump_mode: int,
          **overrides) -> HydroSource:
    try:
        cfg = SourceConfig(
            initial_profile=profile,
            strings_file=str(strings_file) if strings_file else None,
            partons_file=str(partons_file) if partons_file else None,
            ampt_file=str(ampt_file) if ampt_file else None,
            string_dump_mode=string_dump_mode,
            **overrides,
        )
        return HydroSource(cfg)
    except SourceFileError as exc:
        err_console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(code=1)
    except ValueError as exc:
        err_console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(code=2)


@app.command()
def summary(
    profile: str = typer.Argument(..., help="strings (12) or ampt (30)"),
    strings_file: Optional[Path] = typer.Option(None, help="QCD strings list"),
    partons_file: Optional[Path] = typer.Option(None, help="baryon partons list"),
    ampt_file: Optional[Path] = typer.Option(None, help="AMPT parton list"),
    string_dump_mode: int = typer.Option(1),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Read the emitters and report counts and tau_max."""
    _setup_logging(verbose)
    src = _load(profile, strings_file, partons_file, ampt_file, string_dump_mode)
    print(f"[green]{src.cfg.initial_profile}[/green]: {src.sources.n_emitters} emitters, "
          f"tau_max = {src.tau_max:.4f} fm")


@app.command(name="slice")
def slice_(
    profile: str = typer.Argument(..., help="strings (12) or ampt (30)"),
    tau: float = typer.Option(..., help="proper time [fm]"),
    eta_s: float = typer.Option(0.0, help="spacetime rapidity"),
    output: Path = typer.Option(Path("source_slice.npy"), help=".npy output"),
    png: Optional[Path] = typer.Option(None, help="also save a colour map"),
    strings_file: Optional[Path] = typer.Option(None),
    partons_file: Optional[Path] = typer.Option(None),
    ampt_file: Optional[Path] = typer.Option(None),
    string_dump_mode: int = typer.Option(1),
    s_factor: Optional[float] = typer.Option(None, help="global energy scale"),
    delta_tau: Optional[float] = typer.Option(None, help="pre-integration step [fm]"),
    xmax: float = typer.Option(10.0, help="grid half-width [fm]"),
    nx: int = typer.Option(101),
    baryon: bool = typer.Option(False, help="baryon density instead of J^tau"),
    before: bool = typer.Option(False, help="pre-integrated over [0, tau]"),
    workers: int = typer.Option(1, help="threads across grid rows"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Evaluate J^tau (or rho_B) on a transverse slice and save it."""
    _setup_logging(verbose)
    overrides = {k: v for k, v in (("s_factor", s_factor), ("delta_tau", delta_tau)) if v is not None}
    src = _load(profile, strings_file, partons_file, ampt_file, string_dump_mode, **overrides)

    x = np.linspace(-xmax, xmax, nx)
    if baryon:
        field = src.evaluate_baryon_on_grid(tau, x, x, eta_s, max_workers=workers, before=before)
        label = r"$\rho_B$ [fm$^{-4}$]"
    else:
        field = src.evaluate_current_on_grid(tau, x, x, eta_s, max_workers=workers, before=before)[..., 0]
        label = r"$J^\tau$ [fm$^{-4}$]"

    np.save(output, field)
    print(f"saved {field.shape} slice to [bold]{output}[/bold] (max {field.max():.4g})")

    if png is not None:
        from .plotting import save_transverse_slice
        save_transverse_slice(png, x, x, field, cbar_label=label)
        print(f"saved figure to [bold]{png}[/bold]")


if __name__ == "__main__":
    app()
