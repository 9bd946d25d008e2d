"""Fixed-step RK4 integration of the logistic equation.

Stepping loop (per run):
  1. steps = int(t_max / dt); leftover time beyond steps·dt is never simulated
  2. for i = 0 .. steps: emit the sample for the current (t, P)
  3. stop right after emitting if P ≥ 0.999·K (saturation)
  4. otherwise P ← RK4(t, P, dt), t ← t + dt

``run_simulation`` is a generator: callers stop consuming it to abort a run.
Each call owns its own (t, P) state, so independent runs can proceed in
parallel without coordination (``run_batch``).

Preconditions (all five parameters > 0) are enforced by the caller;
see ``popgrowth.config.validate_parameters``.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional

import numpy as np

from popgrowth.model import logistic_growth_rate
from popgrowth.types import SimulationParameters, SimulationSample

logger = logging.getLogger(__name__)

RateFunction = Callable[[float, float, SimulationParameters], float]


# ═══════════════════════════════════════════════════════════════════════
# SINGLE STEP
# ═══════════════════════════════════════════════════════════════════════

def rk4_step(
    t: float,
    population: float,
    dt: float,
    params: SimulationParameters,
    rate: RateFunction = logistic_growth_rate,
) -> float:
    """Advance the population by one classical Runge-Kutta 4 step.

    Args:
        t: Current time.
        population: Current population P(t).
        dt: Step size.
        params: Model parameters passed through to ``rate``.
        rate: Right-hand side f(t, P, params). Defaults to the logistic rate.

    Returns:
        P(t + dt).
    """
    k1 = dt * rate(t, population, params)
    k2 = dt * rate(t + dt / 2.0, population + k1 / 2.0, params)
    k3 = dt * rate(t + dt / 2.0, population + k2 / 2.0, params)
    k4 = dt * rate(t + dt, population + k3, params)
    return population + (k1 + 2 * k2 + 2 * k3 + k4) / 6.0


# ═══════════════════════════════════════════════════════════════════════
# DRIVING LOOP
# ═══════════════════════════════════════════════════════════════════════

def run_simulation(params: SimulationParameters) -> Iterator[SimulationSample]:
    """Lazily integrate the logistic equation from t=0.

    Yields one SimulationSample per accepted step, built from the state
    before that step is taken. The sequence ends after the sample at
    i == steps, or earlier, right after the first sample whose population
    is at or above 99.9% of K.
    """
    K = params.carrying_capacity
    dt = params.step_size
    threshold = params.saturation_population
    steps = params.n_steps

    t = 0.0
    P = params.initial_population
    logger.debug("Integrating %d steps (dt=%g, t_max=%g)",
                 steps, dt, params.max_time)

    for _ in range(steps + 1):
        yield SimulationSample(
            time=t,
            population=P,
            growth_rate=logistic_growth_rate(t, P, params),
            percent_of_capacity=(P / K) * 100.0,
        )

        if P >= threshold:
            logger.info("Population reached 99.9%% of carrying capacity "
                        "at t = %.2f", t)
            return

        P = rk4_step(t, P, dt, params)
        t += dt


# ═══════════════════════════════════════════════════════════════════════
# MATERIALIZED RESULTS
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class SimulationResult:
    """A fully consumed run, with per-field numpy timeseries."""
    params: SimulationParameters
    samples: List[SimulationSample]
    times: np.ndarray
    populations: np.ndarray
    growth_rates: np.ndarray
    percent_of_capacity: np.ndarray
    saturated: bool = False
    saturation_time: Optional[float] = None

    @property
    def n_samples(self) -> int:
        return len(self.samples)

    @property
    def final_sample(self) -> SimulationSample:
        return self.samples[-1]


def collect_samples(params: SimulationParameters) -> SimulationResult:
    """Run a simulation to completion and gather its samples.

    ``saturated`` is True when the run ended on the 99.9%·K condition;
    ``saturation_time`` is then the time of the last sample.
    """
    samples = list(run_simulation(params))
    rows = np.array([s.as_row() for s in samples], dtype=np.float64)

    last = samples[-1]
    saturated = last.population >= params.saturation_population

    return SimulationResult(
        params=params,
        samples=samples,
        times=rows[:, 0],
        populations=rows[:, 1],
        growth_rates=rows[:, 2],
        percent_of_capacity=rows[:, 3],
        saturated=saturated,
        saturation_time=last.time if saturated else None,
    )


def run_batch(
    param_sets: Iterable[SimulationParameters],
    workers: int = 1,
) -> List[SimulationResult]:
    """Run several independent simulations.

    Args:
        param_sets: Parameter sets, one per run.
        workers: 1 runs serially; >1 uses a thread pool of that size.

    Returns:
        One SimulationResult per parameter set, in input order.
    """
    param_sets = list(param_sets)
    if workers <= 1 or len(param_sets) <= 1:
        return [collect_samples(p) for p in param_sets]

    logger.debug("Running %d simulations on %d workers",
                 len(param_sets), workers)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(collect_samples, param_sets))
