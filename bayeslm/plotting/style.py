"""Centralized plotting style, colors, labels, and save helpers."""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

OUTPUT_FORMATS: tuple[str, ...] = ("png", "pdf")
FIGURE_DPI = 300
FIGURE_SUBDIR = "figures"
_STYLE_STATE = {"initialized": False}


@dataclass(frozen=True)
class StyleConfig:
    BASE_FONTSIZE: float = 12.0
    TITLE_FONTSIZE: float = 14.0
    LABEL_FONTSIZE: float = 12.0
    TICK_FONTSIZE: float = 11.0
    LEGEND_FONTSIZE: float = 11.0
    PANEL_FONTSIZE: float = 13.0
    ANNOTATION_FONTSIZE: float = 10.0
    LINEWIDTH: float = 2.0
    LINEWIDTH_THIN: float = 1.2
    ALPHA_HIST: float = 0.55
    ALPHA_DRAW: float = 0.15
    GRID_ALPHA: float = 0.20
    FIGSIZE_SINGLE: tuple[float, float] = (7.0, 4.2)
    FIGSIZE_2x2: tuple[float, float] = (9.5, 7.2)


STYLE = StyleConfig()

FIG_SIZES: dict[str, tuple[float, float]] = {
    "single": STYLE.FIGSIZE_SINGLE,
    "grid_2x2": STYLE.FIGSIZE_2x2,
}

FONT_SIZES = {
    "base": STYLE.BASE_FONTSIZE,
    "title": STYLE.TITLE_FONTSIZE,
    "axis_label": STYLE.LABEL_FONTSIZE,
    "tick": STYLE.TICK_FONTSIZE,
    "legend": STYLE.LEGEND_FONTSIZE,
    "panel": STYLE.PANEL_FONTSIZE,
    "annotation": STYLE.ANNOTATION_FONTSIZE,
}

SPECIES_COLOR_MAP = {
    "setosa": "#1f77b4",
    "versicolor": "#ff7f0e",
    "virginica": "#2ca02c",
}
POSTERIOR_COLOR = "#004371"
INTERVAL_COLOR = "#a50f15"
OBSERVED_COLOR = "0.10"

FEATURE_LABELS = {
    "sepal_length": "Sepal length / cm",
    "sepal_width": "Sepal width / cm",
    "petal_length": "Petal length / cm",
    "petal_width": "Petal width / cm",
}


def apply_global_style(font_scale: float = 1.0) -> None:
    """Apply the project Matplotlib rcParams, scaled by ``font_scale``."""
    scale = float(font_scale)
    plt.rcParams.update(
        {
            "font.family": "STIXGeneral",
            "font.size": STYLE.BASE_FONTSIZE * scale,
            "axes.titlesize": STYLE.TITLE_FONTSIZE * scale,
            "figure.titlesize": STYLE.TITLE_FONTSIZE * scale,
            "axes.labelsize": STYLE.LABEL_FONTSIZE * scale,
            "xtick.labelsize": STYLE.TICK_FONTSIZE * scale,
            "ytick.labelsize": STYLE.TICK_FONTSIZE * scale,
            "legend.fontsize": STYLE.LEGEND_FONTSIZE * scale,
            "mathtext.fontset": "stix",
            "mathtext.default": "regular",
            "axes.titlepad": 8,
            "axes.labelpad": 6,
            "axes.linewidth": STYLE.LINEWIDTH_THIN,
            "axes.spines.top": False,
            "axes.spines.right": False,
            "grid.alpha": STYLE.GRID_ALPHA,
            "grid.linestyle": ":",
            "grid.linewidth": 0.7,
            "axes.grid": False,
            "legend.frameon": False,
            "lines.linewidth": STYLE.LINEWIDTH,
            "figure.dpi": 120,
            "savefig.dpi": FIGURE_DPI,
            "savefig.bbox": "tight",
            "savefig.pad_inches": 0.12,
        }
    )


def set_global_style() -> None:
    """Apply global plotting style once per process."""
    if not _STYLE_STATE["initialized"]:
        apply_global_style(font_scale=1.0)
        _STYLE_STATE["initialized"] = True


def color_for_species(species: str) -> str:
    """Return a stable color for one iris species."""
    return SPECIES_COLOR_MAP.get(str(species), "#4A4A4A")


def feature_label(feature: str) -> str:
    return FEATURE_LABELS.get(feature, feature)


def fig_size(kind: str = "single") -> tuple[float, float]:
    """Return standardized figure size tuple for a named figure kind."""
    return FIG_SIZES.get(kind, FIG_SIZES["single"])


def panel_tag(index: int) -> str:
    """Return panel label text as (a), (b), ..."""
    return f"({chr(ord('a') + int(index))})"


def add_panel_label(ax: Axes, label: str, pad: float = 0.02) -> None:
    """Render a bold panel label in the upper-left corner of ``ax``."""
    ax.text(
        pad,
        1.0 - pad,
        label,
        transform=ax.transAxes,
        ha="left",
        va="top",
        fontsize=FONT_SIZES["panel"],
        fontweight="bold",
        color="0.20",
    )


def add_info_box(ax: Axes, text: str, loc: str = "upper right") -> None:
    """Add a consistently styled annotation anchored to one corner."""
    anchor_map = {
        "upper left": (0.02, 0.90, "left", "top"),
        "upper right": (0.98, 0.90, "right", "top"),
        "lower left": (0.02, 0.08, "left", "bottom"),
        "lower right": (0.98, 0.08, "right", "bottom"),
    }
    x, y, ha, va = anchor_map.get(loc, anchor_map["upper right"])
    ax.text(
        x,
        y,
        text,
        transform=ax.transAxes,
        ha=ha,
        va=va,
        fontsize=FONT_SIZES["annotation"],
        color="0.35",
    )


def clean_axis(ax: Axes, *, grid_axis: str = "y", nbins: int = 6) -> None:
    """Apply consistent ticks, grid, and spine formatting to one axis."""
    ax.tick_params(axis="both", which="major", labelsize=FONT_SIZES["tick"], width=1.0)
    ax.xaxis.set_major_locator(MaxNLocator(nbins=nbins, min_n_ticks=4))
    for side in ("left", "bottom"):
        ax.spines[side].set_linewidth(STYLE.LINEWIDTH_THIN)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.grid(False)
    if grid_axis in {"x", "y", "both"}:
        ax.grid(
            True, axis=grid_axis, alpha=STYLE.GRID_ALPHA, linestyle=":", linewidth=0.7
        )


def set_axis_labels(ax: Axes, x: str | None = None, y: str | None = None) -> None:
    """Apply standardized axis labels with project typography."""
    if x is not None:
        ax.set_xlabel(x, fontsize=FONT_SIZES["axis_label"], labelpad=6)
    if y is not None:
        ax.set_ylabel(y, fontsize=FONT_SIZES["axis_label"], labelpad=6)


def sanitize_filename(name: str) -> str:
    """Normalize a filename component into a stable, filesystem-safe token."""
    text = re.sub(r"\s+", "_", str(name).strip())
    text = re.sub(r"[^A-Za-z0-9._-]+", "_", text)
    text = re.sub(r"_+", "_", text).strip("._")
    return text or "figure"


def figure_dir(output_dir: str) -> str:
    """Return (and create) the figure folder below ``output_dir``."""
    path = os.path.join(output_dir, FIGURE_SUBDIR)
    os.makedirs(path, exist_ok=True)
    return path


def save_figure(
    fig: Figure,
    savepath_base: str | Path,
    formats: Sequence[str] = OUTPUT_FORMATS,
    dpi: int = FIGURE_DPI,
) -> str:
    """Save a figure to multiple formats using one extensionless base path.

    Returns:
        str: Path of the PNG file.
    """
    base = Path(savepath_base)
    if base.suffix:
        base = base.with_suffix("")
    base.parent.mkdir(parents=True, exist_ok=True)
    for ext in formats:
        fig.savefig(
            str(base.with_suffix(f".{ext}")),
            dpi=dpi if ext == "png" else None,
            bbox_inches="tight",
            pad_inches=0.12,
        )
    return str(base.with_suffix(".png"))


def finalize_figure(
    fig: Figure,
    output_dir: str,
    fig_key: str,
    *,
    title: str | None = None,
    close: bool = True,
) -> str:
    """Apply the title and layout, save the figure bundle, and close the figure.

    Returns:
        str: Path of the saved PNG file.
    """
    if title:
        fig.suptitle(title, fontsize=FONT_SIZES["title"])
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        fig.tight_layout(pad=1.2)
    path = save_figure(
        fig, os.path.join(figure_dir(output_dir), sanitize_filename(fig_key))
    )
    if close:
        plt.close(fig)
    return path
