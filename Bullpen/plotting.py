"""
plotting.py

Visualization functions for pitcher comparison results.
"""

from typing import Optional

import numpy as np
import pandas as pd
import matplotlib
import matplotlib.pyplot as plt

from .config import RUN_BUCKET_LABELS

BUCKET_DISPLAY = {
    "runs0": "0 runs",
    "runs1": "1 run",
    "runs2": "2 runs",
    "runs3plus": "3+ runs",
}


def plot_run_distribution(
    results_df: pd.DataFrame,
    save_path: Optional[str] = None,
    figsize: tuple = (10, 6),
) -> plt.Figure:
    """
    Plot stacked runs-allowed distribution for each pitcher.

    Parameters
    ----------
    results_df : pd.DataFrame
        Output of results_to_frame()
    save_path : str, optional
        Path to save figure
    figsize : tuple
        Figure size

    Returns
    -------
    plt.Figure
    """
    if len(results_df) == 0:
        raise ValueError("No results to plot")

    fig, ax = plt.subplots(figsize=figsize)

    names = results_df["pitcher_name"].tolist()
    x = np.arange(len(names))
    bottom = np.zeros(len(names))
    colors = matplotlib.colormaps["RdYlGn_r"](np.linspace(0.1, 0.9, len(RUN_BUCKET_LABELS)))

    for label, color in zip(RUN_BUCKET_LABELS, colors):
        values = results_df[label].to_numpy(dtype=float) * 100
        ax.bar(x, values, bottom=bottom, color=color, label=BUCKET_DISPLAY[label])
        bottom += values

    ax.set_xticks(x)
    ax.set_xticklabels(names, rotation=20, ha="right")
    ax.set_ylabel("Share of trials (%)", fontsize=12)
    ax.set_ylim(0, 100)
    ax.legend(loc="upper right", fontsize=9)

    trials = int(results_df["iterations"].iloc[0])
    ax.set_title(f"Runs allowed over {trials:,} simulated half-innings", fontsize=12)

    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig


def plot_wp_comparison(
    results_df: pd.DataFrame,
    save_path: Optional[str] = None,
    figsize: tuple = (10, 6),
) -> plt.Figure:
    """
    Plot mean win probability per pitcher against the baseline.

    The optimal choice is highlighted; the dashed line marks the win
    probability before the pitching change.
    """
    if len(results_df) == 0:
        raise ValueError("No results to plot")

    fig, ax = plt.subplots(figsize=figsize)

    # Best pitcher on top
    df = results_df.iloc[::-1]
    y = np.arange(len(df))
    wp_pct = df["avg_win_probability"].to_numpy(dtype=float) * 100
    colors = ["tab:green" if opt else "tab:gray" for opt in df["optimal"]]

    ax.barh(y, wp_pct, color=colors)
    ax.set_yticks(y)
    ax.set_yticklabels(df["pitcher_name"].tolist())

    baseline_pct = float(df["baseline_win_probability"].iloc[0]) * 100
    ax.axvline(baseline_pct, color="black", linestyle="--", alpha=0.6, label="Baseline")

    for yi, wp, delta in zip(y, wp_pct, df["wp_delta"].to_numpy(dtype=float)):
        ax.text(wp + 0.3, yi, f"{wp:.1f}% ({delta * 100:+.1f})", va="center", fontsize=9)

    ax.set_xlabel("Mean win probability (%)", fontsize=12)
    ax.set_xlim(0, min(100, max(wp_pct.max(), baseline_pct) + 12))
    ax.legend(loc="lower right", fontsize=9)
    ax.set_title("Win probability by bullpen choice", fontsize=12)

    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig
