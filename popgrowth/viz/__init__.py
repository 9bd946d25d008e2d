"""popgrowth visualization library.

Modules:
  - style: Dark theme colours, figure and save helpers
  - population: Trajectory and phase plots for a single run
"""

from popgrowth.viz.style import (  # noqa: F401
    ACCENT_COLORS,
    DARK_BG,
    DARK_PANEL,
    GRID_COLOR,
    TEXT_COLOR,
    add_legend,
    logistic_axes,
    save_figure,
)

from popgrowth.viz.population import (  # noqa: F401
    plot_growth_rate,
    plot_population_trajectory,
)
