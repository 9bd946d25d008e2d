"""Logistic growth right-hand side.

    dP/dt = r × P × (1 − P/K)

Negative above K, zero at both equilibria (P = 0 and P = K).
"""

from __future__ import annotations

from popgrowth.types import SimulationParameters


def logistic_growth_rate(t: float, population: float,
                         params: SimulationParameters) -> float:
    """Instantaneous growth rate dP/dt.

    The equation is autonomous; ``t`` is accepted so the same signature
    serves time-dependent rate functions in ``rk4_step``.
    """
    r = params.growth_rate
    K = params.carrying_capacity
    return r * population * (1.0 - population / K)
