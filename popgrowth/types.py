"""Core data types for popgrowth.

This module is the single source of truth for:
  - SimulationParameters: the five inputs of a logistic run
  - SimulationSample: one (time, population, rate, %K) record
  - ModelAnalysis: closed-form facts derived from the parameters
  - SATURATION_FRACTION: early-stop threshold as a fraction of K

All records are frozen; a sample never changes once emitted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


# ═══════════════════════════════════════════════════════════════════════
# CONSTANTS
# ═══════════════════════════════════════════════════════════════════════

# Run stops once P reaches this fraction of K (99.9%).
SATURATION_FRACTION = 0.999


# ═══════════════════════════════════════════════════════════════════════
# PARAMETERS & SAMPLES
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SimulationParameters:
    """Inputs of one logistic growth run.

    Validation lives at the boundary (``popgrowth.config``); the numeric
    core assumes every field is strictly positive.
    """
    growth_rate: float          # r, intrinsic growth rate
    carrying_capacity: float    # K, environment ceiling
    initial_population: float   # P0, population at t=0
    max_time: float             # t_max, simulation horizon
    step_size: float            # dt, fixed RK4 step

    @property
    def n_steps(self) -> int:
        """Number of whole steps in the horizon (truncating division)."""
        return int(self.max_time / self.step_size)

    @property
    def saturation_population(self) -> float:
        return SATURATION_FRACTION * self.carrying_capacity


@dataclass(frozen=True)
class SimulationSample:
    """State of the run at one accepted step."""
    time: float
    population: float
    growth_rate: float           # dP/dt at (time, population)
    percent_of_capacity: float   # 100·P/K

    def as_row(self) -> Tuple[float, float, float, float]:
        return (self.time, self.population, self.growth_rate,
                self.percent_of_capacity)


# ═══════════════════════════════════════════════════════════════════════
# ANALYTICAL FACTS
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ModelAnalysis:
    """Closed-form properties of the logistic equation for one parameter set.

    half_capacity_time is None when the formula does not yield a positive
    time (P0 >= K/2, including P0 >= K).
    """
    equilibria: Tuple[float, float]
    half_capacity_time: Optional[float]
    max_growth_rate: float
    max_growth_population: float

    @property
    def has_half_capacity_time(self) -> bool:
        return self.half_capacity_time is not None
