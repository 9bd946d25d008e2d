"""Population trajectory visualizations for popgrowth.

Every function:
  - Accepts a SimulationResult as input
  - Returns a matplotlib Figure
  - Has an optional ``save_path`` parameter (saves PNG when given)
  - Is built with ``logistic_axes`` from ``popgrowth.viz.style``

matplotlib backend is forced to Agg (no display) on import.
"""

from __future__ import annotations

import matplotlib
matplotlib.use('Agg')

from typing import Optional, TYPE_CHECKING

import matplotlib.pyplot as plt
import numpy as np

from popgrowth.model import logistic_growth_rate
from popgrowth.viz.style import (
    CAPACITY_COLOR,
    HALF_CAPACITY_COLOR,
    SATURATION_COLOR,
    TRAJECTORY_COLOR,
    add_legend,
    logistic_axes,
    save_figure,
)

if TYPE_CHECKING:
    from popgrowth.integrator import SimulationResult
    from popgrowth.types import ModelAnalysis


# ═══════════════════════════════════════════════════════════════════════
# 1. POPULATION TRAJECTORY
# ═══════════════════════════════════════════════════════════════════════

def plot_population_trajectory(
    result: 'SimulationResult',
    analysis: Optional['ModelAnalysis'] = None,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Population over time with K and K/2 reference lines.

    Args:
        result: SimulationResult from collect_samples().
        analysis: Optional ModelAnalysis; marks the half-capacity time
            when it is defined.
        save_path: Optional path to save the figure.

    Returns:
        matplotlib Figure.
    """
    K = result.params.carrying_capacity
    fig, ax = logistic_axes('Logistic Growth Trajectory', 'Time', 'Population')

    ax.plot(result.times, result.populations, color=TRAJECTORY_COLOR,
            linewidth=2.5, label='Population (RK4)', zorder=3)
    ax.axhline(K, color=CAPACITY_COLOR, linestyle='--', linewidth=1.5,
               alpha=0.7, label=f'K = {K:.0f}')
    ax.axhline(K / 2.0, color=HALF_CAPACITY_COLOR, linestyle=':',
               linewidth=1.2, alpha=0.6, label='K/2')

    if analysis is not None and analysis.half_capacity_time is not None:
        ax.axvline(analysis.half_capacity_time, color=HALF_CAPACITY_COLOR,
                   linestyle=':', linewidth=1.2, alpha=0.8,
                   label=f't½ = {analysis.half_capacity_time:.2f}')

    if result.saturated:
        ax.scatter([result.saturation_time], [result.populations[-1]],
                   color=SATURATION_COLOR, s=40, zorder=4,
                   label=f'99.9% K at t = {result.saturation_time:.2f}')

    ax.fill_between(result.times, result.populations, alpha=0.15,
                    color=TRAJECTORY_COLOR)

    add_legend(ax)
    ax.set_xlim(0, max(result.times[-1], result.params.step_size))
    ax.set_ylim(bottom=0)

    if save_path:
        save_figure(fig, save_path)
    return fig


# ═══════════════════════════════════════════════════════════════════════
# 2. GROWTH RATE vs POPULATION
# ═══════════════════════════════════════════════════════════════════════

def plot_growth_rate(
    result: 'SimulationResult',
    save_path: Optional[str] = None,
) -> plt.Figure:
    """dP/dt against P: simulated samples over the analytic parabola.

    The parabola peaks at (K/2, r·K/4).
    """
    params = result.params
    K = params.carrying_capacity
    P_hi = max(K, float(np.max(result.populations)))
    P_grid = np.linspace(0.0, P_hi, 200)
    curve = logistic_growth_rate(0.0, P_grid, params)

    fig, ax = logistic_axes('Growth Rate vs Population', 'Population P', 'dP/dt')
    ax.plot(P_grid, curve, color=CAPACITY_COLOR, linewidth=1.5, alpha=0.7,
            label='r·P·(1 − P/K)')
    ax.scatter(result.populations, result.growth_rates, color=TRAJECTORY_COLOR,
               s=6, alpha=0.8, label='Samples', zorder=3)
    ax.scatter([K / 2.0], [params.growth_rate * K / 4.0],
               color=HALF_CAPACITY_COLOR, s=50, zorder=4,
               label=f'Max rate {params.growth_rate * K / 4.0:.4f}')
    ax.axhline(0.0, color=SATURATION_COLOR, linewidth=0.8, alpha=0.5)

    add_legend(ax)

    if save_path:
        save_figure(fig, save_path)
    return fig
