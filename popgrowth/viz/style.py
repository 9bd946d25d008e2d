"""Dark theme styling for popgrowth plots.

Every figure in the package is a single panel built by ``logistic_axes``
and written by ``save_figure``, so the palette lives in one place.
"""

from pathlib import Path

import matplotlib.pyplot as plt

# ═══════════════════════════════════════════════════════════════════════
# COLOR PALETTE
# ═══════════════════════════════════════════════════════════════════════

DARK_BG = '#1a1a2e'
DARK_PANEL = '#16213e'
TEXT_COLOR = '#e0e0e0'
GRID_COLOR = '#2a2a4a'

ACCENT_COLORS = [
    '#e94560',  # crimson
    '#48c9b0',  # teal
    '#f39c12',  # amber
    '#3498db',  # sky blue
    '#2ecc71',  # green
]

# Role → color for the logistic plots
TRAJECTORY_COLOR = ACCENT_COLORS[3]
CAPACITY_COLOR = ACCENT_COLORS[1]
HALF_CAPACITY_COLOR = ACCENT_COLORS[2]
SATURATION_COLOR = ACCENT_COLORS[0]

FIGSIZE = (10, 6)


# ═══════════════════════════════════════════════════════════════════════
# FIGURE HELPERS
# ═══════════════════════════════════════════════════════════════════════

def logistic_axes(title, xlabel, ylabel, figsize=FIGSIZE):
    """Create a dark single-panel figure with title and axis labels set.

    Returns (fig, ax).
    """
    fig, ax = plt.subplots(figsize=figsize)
    fig.patch.set_facecolor(DARK_BG)

    ax.set_facecolor(DARK_PANEL)
    ax.tick_params(colors=TEXT_COLOR)
    for spine in ax.spines.values():
        spine.set_color(GRID_COLOR)
    ax.grid(True, color=GRID_COLOR, alpha=0.3, linewidth=0.5)

    ax.set_title(title, fontsize=14, fontweight='bold', color=TEXT_COLOR)
    ax.set_xlabel(xlabel, fontsize=12, color=TEXT_COLOR)
    ax.set_ylabel(ylabel, fontsize=12, color=TEXT_COLOR)
    return fig, ax


def add_legend(ax):
    """Legend on the dark panel."""
    return ax.legend(facecolor=DARK_PANEL, edgecolor=GRID_COLOR,
                     labelcolor=TEXT_COLOR, fontsize=10)


def save_figure(fig, save_path, dpi=150):
    """Write a figure as PNG (creating parent dirs) and close it."""
    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(save_path, dpi=dpi, facecolor=DARK_BG,
                edgecolor='none', bbox_inches='tight')
    plt.close(fig)
