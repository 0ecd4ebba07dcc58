"""
Plotting for TOPSIS rankings and sensitivity analysis.
"""
import numpy as np
import pandas as pd
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from typing import Optional, Tuple
from pathlib import Path

plt.rcParams['font.size'] = 12
plt.rcParams['axes.labelsize'] = 14
plt.rcParams['axes.titlesize'] = 16
plt.rcParams['axes.titleweight'] = 'bold'
plt.rcParams['axes.grid'] = True
plt.rcParams['grid.alpha'] = 0.3


def set_plot_style(style: str = 'seaborn-v0_8-whitegrid'):
    """Set matplotlib style, if the installed matplotlib provides it."""
    if style in plt.style.available:
        plt.style.use(style)


def plot_topsis_ranking(
    result_df: pd.DataFrame,
    label_col: Optional[str] = None,
    score_col: str = 'Topsis Score',
    rank_col: str = 'Rank',
    title: str = "TOPSIS Ranking",
    output_path: Optional[Path] = None,
    figsize: Tuple[int, int] = (12, 6),
    dpi: int = 300
) -> plt.Figure:
    """
    Plot TOPSIS closeness scores in rank order.

    Args:
        result_df: Result table with label, score and rank columns
        label_col: Column with alternative names (defaults to the first column)
        score_col: Column with closeness scores
        rank_col: Column with ranks
        title: Plot title
        output_path: Path to save figure
        figsize: Figure size
        dpi: Resolution of the saved figure

    Returns:
        Matplotlib figure
    """
    if label_col is None:
        label_col = result_df.columns[0]

    # Best at the top of a horizontal bar chart
    df = result_df.sort_values(rank_col, ascending=False)

    names = df[label_col].astype(str).values
    scores = df[score_col].astype(float).values
    ranks = df[rank_col].astype(int).values

    fig, ax = plt.subplots(figsize=figsize)

    # Color gradient (best = green, worst = red)
    colors = plt.cm.RdYlGn(np.linspace(0.2, 0.8, len(names)))

    bars = ax.barh(names, scores, color=colors, edgecolor='black', alpha=0.8)

    for bar, score, r in zip(bars, scores, ranks):
        ax.text(bar.get_width() + 0.01, bar.get_y() + bar.get_height()/2,
                f'#{r} ({score:.4f})', ha='left', va='center', fontsize=10)

    ax.set_xlim(0, 1.15)
    ax.set_xlabel('Closeness Score (higher is better)')
    ax.set_title(title)

    fig.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=dpi, bbox_inches='tight', facecolor='white')

    return fig


def plot_weight_sensitivity_heatmap(
    sensitivity_df: pd.DataFrame,
    title: str = "Rank Stability Under Weight Perturbations",
    output_path: Optional[Path] = None,
    figsize: Tuple[int, int] = (14, 8),
    dpi: int = 300
) -> plt.Figure:
    """
    Plot heatmap of rank changes under weight perturbations.

    Args:
        sensitivity_df: DataFrame from weight_sensitivity()
        title: Plot title
        output_path: Path to save figure
        figsize: Figure size
        dpi: Resolution of the saved figure

    Returns:
        Matplotlib figure
    """
    pivot = sensitivity_df.pivot_table(
        index='alternative',
        columns=['criterion', 'perturbation'],
        values='rank_change',
        aggfunc='mean',
        sort=False
    )

    fig, ax = plt.subplots(figsize=figsize)

    values = pivot.to_numpy(dtype=float)
    limit = max(1.0, float(np.nanmax(np.abs(values)))) if values.size else 1.0
    image = ax.imshow(values, cmap='RdYlGn_r', vmin=-limit, vmax=limit, aspect='auto')
    fig.colorbar(image, ax=ax, label='Rank Change')

    for i in range(values.shape[0]):
        for j in range(values.shape[1]):
            if not np.isnan(values[i, j]):
                ax.text(j, i, f'{values[i, j]:.0f}', ha='center', va='center',
                        fontsize=11, fontweight='bold')

    ax.set_xticks(range(len(pivot.columns)))
    ax.set_xticklabels([f'{c} ({d})' for c, d in pivot.columns], rotation=45, ha='right')
    ax.set_yticks(range(len(pivot.index)))
    ax.set_yticklabels(pivot.index)
    ax.grid(False)

    ax.set_title(title)
    ax.set_xlabel('Criterion & Perturbation Direction')
    ax.set_ylabel('Alternative')

    fig.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=dpi, bbox_inches='tight', facecolor='white')

    return fig
