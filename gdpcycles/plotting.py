"""
plotting.py
-----------
Chart suite for the business-cycle report.

Every chart uses the integer quarter position as x coordinate and labels
it through quarter_axis_ticks, the one place where tick positions and
period labels are computed. Charts consume the plain frames and dicts
produced by filters.decompose and cycle_stats.summarize_cycles and write
PNG files; they never compute statistics themselves.
"""

import logging
import os
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from gdpcycles.config import SERIES_LABELS, TICK_STRIDE

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Color Palette (Institutional)
# ---------------------------------------------------------------------------
SERIES_COLORS = ["#2980B9", "#D35400"]
COLORS = {
    "trend": "#1B2838", "zero": "#AAAAAA",
    "corr_pos": "#27AE60", "corr_neg": "#E74C3C", "peak": "#6C3483",
}


def _apply_style():
    plt.rcParams.update({
        "figure.facecolor": "white", "axes.facecolor": "#FAFAFA",
        "axes.edgecolor": "#CCCCCC", "axes.grid": True,
        "grid.color": "#E8E8E8", "grid.linewidth": 0.5,
        "font.family": "sans-serif",
        "font.sans-serif": ["DejaVu Sans", "Arial", "Helvetica"],
        "font.size": 10, "axes.titlesize": 13, "axes.titleweight": "bold",
        "axes.labelsize": 10, "xtick.labelsize": 9, "ytick.labelsize": 9,
        "legend.fontsize": 9, "legend.framealpha": 0.95,
        "legend.edgecolor": "#CCCCCC", "figure.dpi": 150,
    })


def _label(name):
    return SERIES_LABELS.get(name, name.replace("_", " "))


def _save(fig, out_dir, filename):
    fp = os.path.join(out_dir, filename)
    fig.tight_layout()
    fig.savefig(fp, dpi=300, bbox_inches="tight", facecolor="white")
    plt.close(fig)
    logger.info("Chart saved: %s", fp)
    return fp


def quarter_axis_ticks(n: int, stride: int = TICK_STRIDE, labels=None, offset: int = 0):
    """
    Tick positions and labels for a chart of n points.

    Positions are 0, stride, 2*stride, ... below n. Label for position p
    is labels[offset + p]; offset shifts into a longer label source, e.g.
    offset = w - 1 for a rolling series whose first point is the end of
    the first window. Without labels, the positions themselves are used.
    """
    if stride < 1:
        raise ValueError("Tick stride must be at least 1.")
    positions = list(range(0, n, stride))
    if labels is None:
        return positions, [str(p) for p in positions]
    labels = list(labels)
    if offset + n > len(labels):
        raise ValueError(f"Label source has {len(labels)} entries; need {offset + n}.")
    return positions, [labels[offset + p] for p in positions]


def _set_quarter_axis(ax, n, labels, offset=0, stride=TICK_STRIDE):
    positions, tick_labels = quarter_axis_ticks(n, stride, labels, offset)
    ax.set_xticks(positions)
    ax.set_xticklabels(tick_labels, rotation=45, ha="right")
    ax.set_xlim(-0.5, n - 0.5)


def plot_trend_decomposition(decomposed, series_names, out_dir):
    """Log level and HP trend (top) and cycle (bottom), one column per series."""
    _apply_style()
    n = len(decomposed)
    x = np.arange(n)
    periods = decomposed["period"].tolist()
    fig, axes = plt.subplots(2, len(series_names), figsize=(7 * len(series_names), 8),
                             sharex=True, squeeze=False,
                             gridspec_kw={"height_ratios": [2, 1]})

    for col, name in enumerate(series_names):
        color = SERIES_COLORS[col % len(SERIES_COLORS)]
        ax_top, ax_bot = axes[0, col], axes[1, col]
        ax_top.plot(x, decomposed[f"{name}_log"], color=color, linewidth=1.8, label="log GDP")
        ax_top.plot(x, decomposed[f"{name}_trend"], color=COLORS["trend"], linewidth=2.2,
                    linestyle="--", label="HP trend")
        ax_top.set_title(f"{_label(name)}: Trend Decomposition")
        ax_top.set_ylabel("log level"); ax_top.legend(loc="upper left")

        ax_bot.bar(x, decomposed[f"{name}_cycle"] * 100, color=color, alpha=0.7, width=0.8)
        ax_bot.axhline(0, color=COLORS["zero"], linewidth=0.8)
        ax_bot.set_ylabel("Cycle (% of trend)")
        _set_quarter_axis(ax_bot, n, periods)

    return _save(fig, out_dir, "Trend_Decomposition.png")


def plot_cycles(decomposed, series_names, summary, out_dir):
    """Both cycle components on one axis, with the contemporaneous correlation."""
    _apply_style()
    n = len(decomposed)
    x = np.arange(n)
    fig, ax = plt.subplots(figsize=(15, 6))
    for i, name in enumerate(series_names):
        ax.plot(x, decomposed[f"{name}_cycle"] * 100, color=SERIES_COLORS[i % len(SERIES_COLORS)],
                linewidth=2, label=f"{_label(name)} (vol {summary['volatility'][name]:.2f})")
    ax.axhline(0, color=COLORS["zero"], linewidth=0.8)
    ax.text(0.02, 0.04, f"Corr = {summary['correlation']:.3f}", transform=ax.transAxes,
            fontsize=10, bbox=dict(facecolor="white", alpha=0.9, edgecolor="#CCCCCC"))
    ax.set_title("HP Cycle Components")
    ax.set_ylabel("Deviation from trend (%)"); ax.legend(loc="upper left")
    _set_quarter_axis(ax, n, decomposed["period"].tolist())
    return _save(fig, out_dir, "Cycles.png")


def plot_volatility(summary, series_names, out_dir):
    _apply_style()
    fig, ax = plt.subplots(figsize=(7, 5))
    vals = [summary["volatility"][name] for name in series_names]
    bars = ax.bar([_label(n) for n in series_names], vals,
                  color=SERIES_COLORS[:len(series_names)], alpha=0.85,
                  edgecolor="white", linewidth=1.5)
    for bar, val in zip(bars, vals):
        ax.text(bar.get_x() + bar.get_width() / 2, bar.get_height(), f"{val:.2f}",
                ha="center", va="bottom", fontsize=10, fontweight="bold")
    ax.set_ylabel("Std. dev. of cycle x 100")
    ax.set_title(f"Cycle Volatility (relative: {summary['relative_volatility']:.2f}x)")
    return _save(fig, out_dir, "Volatility.png")


def plot_rolling_correlation(rolling, window, periods, out_dir):
    """
    Rolling correlation against the period label of each window's end.

    periods is the full label sequence of the source rows; the rolling
    series starts at row window - 1.
    """
    _apply_style()
    n = len(rolling)
    x = np.arange(n)
    values = rolling.to_numpy()
    fig, ax = plt.subplots(figsize=(15, 5))
    ax.plot(x, values, color=SERIES_COLORS[0], linewidth=2, marker="o", markersize=2.5)
    ax.fill_between(x, 0, values, where=values >= 0, color=COLORS["corr_pos"], alpha=0.15)
    ax.fill_between(x, 0, values, where=values < 0, color=COLORS["corr_neg"], alpha=0.15)
    ax.axhline(0, color=COLORS["zero"], linewidth=0.8)
    mean = np.nanmean(values)
    ax.axhline(mean, color=COLORS["trend"], linewidth=1.2, linestyle="--",
               label=f"Mean: {mean:.3f}")
    ax.set_ylim(-1.05, 1.05)
    ax.set_ylabel("Correlation")
    ax.set_title(f"Rolling Cycle Correlation ({window}-quarter window)")
    ax.legend(loc="lower left")
    _set_quarter_axis(ax, n, periods, offset=window - 1)
    return _save(fig, out_dir, f"Rolling_Correlation_w{window}.png")


def plot_cross_correlation(table, series_names, out_dir):
    _apply_style()
    first, second = (_label(n) for n in series_names)
    fig, ax = plt.subplots(figsize=(10, 5))
    colors = [COLORS["peak"] if peak else (COLORS["corr_pos"] if c >= 0 else COLORS["corr_neg"])
              for c, peak in zip(table["Correlation"], table["Peak"])]
    ax.bar(table["Lead"], table["Correlation"], color=colors, alpha=0.85, edgecolor="white")
    ax.axhline(0, color="#333333", linewidth=0.8)
    ax.set_xticks(table["Lead"].tolist())
    ax.set_xlabel(f"k (quarters {first} leads {second})")
    ax.set_ylabel(f"corr({first}[t], {second}[t+k])")
    ax.set_title("Cross-Correlation of Cycles")
    return _save(fig, out_dir, "Cross_Correlation.png")
