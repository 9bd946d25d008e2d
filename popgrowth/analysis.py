"""Closed-form analysis of the logistic equation.

No iteration: every quantity follows directly from (r, K, P0).

  - Equilibria: P* = 0 (extinction) and P* = K (carrying capacity)
  - Half-capacity time: t½ = ln(K/P0 − 1) / r, from the analytic solution
    P(t) = K / (1 + (K/P0 − 1)·e^(−rt)) solved for P = K/2
  - Maximum growth: d²P/dt² = 0 at P = K/2, where dP/dt = r·K/4
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from popgrowth.model import logistic_growth_rate
from popgrowth.types import ModelAnalysis, SimulationParameters


def equilibria(params: SimulationParameters) -> Tuple[float, float]:
    """Both fixed points, always reported."""
    return (0.0, float(params.carrying_capacity))


def half_capacity_time(params: SimulationParameters) -> Optional[float]:
    """Time for the population to reach K/2, or None if not applicable.

    Only a positive time is reported. P0 ≥ K makes the log argument
    non-positive; K/2 ≤ P0 < K gives t½ ≤ 0 (already at or past K/2).
    """
    ratio = params.carrying_capacity / params.initial_population - 1.0
    if ratio <= 0.0:
        return None
    t_half = float(np.log(ratio) / params.growth_rate)
    if t_half <= 0.0:
        return None
    return t_half


def max_growth(params: SimulationParameters) -> Tuple[float, float]:
    """(population, rate) at the inflection point of the logistic curve."""
    P_star = params.carrying_capacity / 2.0
    return P_star, logistic_growth_rate(0.0, P_star, params)


def analyze_model(params: SimulationParameters) -> ModelAnalysis:
    """Collect all analytical facts for one parameter set."""
    P_star, rate_max = max_growth(params)
    return ModelAnalysis(
        equilibria=equilibria(params),
        half_capacity_time=half_capacity_time(params),
        max_growth_rate=rate_max,
        max_growth_population=P_star,
    )
