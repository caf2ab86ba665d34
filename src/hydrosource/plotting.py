"""src/hydrosource/plotting.py

Quick-look matplotlib helpers for source slices.

Default choices:
- no grid
- no figure titles by default
- clean spines
- consistent fonts/sizes
"""

from __future__ import annotations

import matplotlib as mpl
import matplotlib.pyplot as plt
import numpy as np


def set_pub_style():
    mpl.rcParams.update({
        "figure.figsize": (5.2, 4.2),
        "figure.dpi": 120,
        "savefig.dpi": 300,
        "axes.grid": False,
        "axes.spines.top": False,
        "axes.spines.right": False,
        "legend.frameon": False,
        "font.size": 12,
        "axes.labelsize": 12,
        "xtick.labelsize": 11,
        "ytick.labelsize": 11,
        "mathtext.fontset": "stix",
        "font.family": "DejaVu Sans",
    })


def style_ax(ax):
    ax.grid(False)
    ax.set_title("")
    for spine in ("top", "right"):
        ax.spines[spine].set_visible(False)


def add_panel_label(ax, label: str, *, x: float = 0.02, y: float = 0.98):
    ax.text(x, y, label, transform=ax.transAxes, ha="left", va="top", fontsize=12, fontweight="bold")


def plot_transverse_slice(ax, x: np.ndarray, y: np.ndarray, field: np.ndarray, *,
                          cbar_label: str = r"$J^\tau$ [fm$^{-4}$]", panel: str = ""):
    """Colour map of a (ny, nx) field on the transverse plane."""
    mesh = ax.pcolormesh(x, y, field, shading="auto", cmap="inferno")
    cb = ax.figure.colorbar(mesh, ax=ax)
    cb.set_label(cbar_label)
    ax.set_xlabel(r"$x$ [fm]")
    ax.set_ylabel(r"$y$ [fm]")
    ax.set_aspect("equal")
    style_ax(ax)
    if panel:
        add_panel_label(ax, panel)
    return mesh


def save_transverse_slice(path, x, y, field, **kw):
    set_pub_style()
    fig, ax = plt.subplots()
    plot_transverse_slice(ax, x, y, field, **kw)
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
