"""Tests for popgrowth.integrator: RK4 step, driving loop, batch runs.

Reference solution for comparisons:
    P(t) = K / (1 + (K/P0 − 1)·e^(−rt))
"""

import inspect
import itertools
import logging

import numpy as np
import pytest

from popgrowth.integrator import (
    SimulationResult,
    collect_samples,
    rk4_step,
    run_batch,
    run_simulation,
)
from popgrowth.types import SimulationParameters


# ─── Helpers ──────────────────────────────────────────────────────────

def _params(r=0.5, K=1000.0, P0=10.0, t_max=50.0, dt=0.1):
    return SimulationParameters(growth_rate=r, carrying_capacity=K,
                                initial_population=P0, max_time=t_max,
                                step_size=dt)


def _analytic(t, p):
    K, P0, r = p.carrying_capacity, p.initial_population, p.growth_rate
    return K / (1.0 + (K / P0 - 1.0) * np.exp(-r * t))


BACTERIA = _params()
CITY = _params(r=0.03, K=100000.0, P0=5000.0, t_max=200.0, dt=0.1)
FISH = _params(r=0.2, K=500.0, P0=20.0, t_max=50.0, dt=0.1)


# ─── rk4_step ─────────────────────────────────────────────────────────

class TestRk4Step:
    def test_matches_analytic_one_step(self):
        p = BACTERIA
        assert rk4_step(0.0, 10.0, 0.1, p) == pytest.approx(
            _analytic(0.1, p), rel=1e-8)

    def test_fixed_point_at_capacity(self):
        assert rk4_step(0.0, 1000.0, 0.1, BACTERIA) == 1000.0

    def test_fixed_point_at_zero(self):
        assert rk4_step(0.0, 0.0, 0.1, BACTERIA) == 0.0

    def test_decays_above_capacity(self):
        assert rk4_step(0.0, 1500.0, 0.1, BACTERIA) < 1500.0

    def test_custom_constant_rate(self):
        rate = lambda t, P, params: 3.0
        assert rk4_step(2.0, 1.0, 0.5, BACTERIA, rate=rate) == pytest.approx(2.5)

    def test_time_argument_threaded(self):
        """f = t² integrates exactly (Simpson weights are exact for cubics)."""
        rate = lambda t, P, params: t ** 2
        t0, dt = 1.0, 0.5
        expected = ((t0 + dt) ** 3 - t0 ** 3) / 3.0
        assert rk4_step(t0, 0.0, dt, BACTERIA, rate=rate) == pytest.approx(expected)

    def test_stage_weights(self):
        """P_next = P + (k1 + 2k2 + 2k3 + k4)/6 with dt-scaled stages."""
        calls = []

        def rate(t, P, params):
            calls.append((t, P))
            return 1.0

        rk4_step(0.0, 5.0, 0.2, BACTERIA, rate=rate)
        times = [c[0] for c in calls]
        pops = [c[1] for c in calls]
        assert times == pytest.approx([0.0, 0.1, 0.1, 0.2])
        assert pops == pytest.approx([5.0, 5.1, 5.1, 5.2])


# ─── run_simulation ───────────────────────────────────────────────────

class TestRunSimulation:
    def test_is_lazy_generator(self):
        assert inspect.isgenerator(run_simulation(BACTERIA))

    def test_first_sample(self):
        first = next(run_simulation(BACTERIA))
        assert first.time == 0.0
        assert first.population == 10.0
        assert first.growth_rate == pytest.approx(4.95)
        assert first.percent_of_capacity == pytest.approx(1.0)

    def test_caller_can_stop_early(self):
        """Huge horizon, but only the consumed prefix is computed."""
        p = _params(t_max=1e9, r=1e-6)
        head = list(itertools.islice(run_simulation(p), 3))
        assert len(head) == 3
        assert [s.time for s in head] == pytest.approx([0.0, 0.1, 0.2])

    def test_not_restartable(self):
        gen = run_simulation(BACTERIA)
        first_pass = list(gen)
        assert len(first_pass) > 0
        assert list(gen) == []

    def test_times_strictly_increasing(self):
        times = [s.time for s in run_simulation(FISH)]
        assert all(b > a for a, b in zip(times, times[1:]))

    def test_times_accumulate_step(self):
        samples = list(run_simulation(FISH))
        for i, s in enumerate(samples):
            assert s.time == pytest.approx(i * 0.1, abs=1e-9)

    def test_monotonic_below_capacity(self):
        samples = list(run_simulation(FISH))
        pops = [s.population for s in samples]
        assert all(b >= a for a, b in zip(pops, pops[1:]))
        assert all(s.growth_rate >= 0.0 for s in samples)

    def test_growth_rate_vanishes_near_capacity(self):
        samples = list(run_simulation(BACTERIA))
        peak = max(s.growth_rate for s in samples)
        assert samples[-1].growth_rate < 0.01 * peak

    def test_sample_fields_consistent(self):
        for s in run_simulation(FISH):
            assert s.percent_of_capacity == pytest.approx(100.0 * s.population / 500.0)
            assert s.growth_rate == pytest.approx(
                0.2 * s.population * (1.0 - s.population / 500.0))

    def test_tracks_analytic_solution(self):
        for s in run_simulation(BACTERIA):
            assert s.population == pytest.approx(_analytic(s.time, BACTERIA), rel=1e-5)

    def test_deterministic(self):
        assert list(run_simulation(CITY)) == list(run_simulation(CITY))


class TestTermination:
    def test_saturated_initial_population_single_sample(self):
        samples = list(run_simulation(_params(P0=999.0)))
        assert len(samples) == 1
        assert samples[0].time == 0.0

    def test_above_capacity_single_sample(self):
        """P0 > K already satisfies P ≥ 0.999·K."""
        samples = list(run_simulation(_params(P0=2000.0)))
        assert len(samples) == 1
        assert samples[0].growth_rate < 0.0

    def test_just_below_threshold_continues(self):
        samples = list(run_simulation(_params(P0=998.0, t_max=5.0)))
        assert len(samples) > 1
        assert samples[-1].population >= 999.0

    def test_saturation_is_last_sample(self):
        samples = list(run_simulation(BACTERIA))
        assert samples[-1].population >= 0.999 * 1000.0
        assert all(s.population < 0.999 * 1000.0 for s in samples[:-1])

    def test_bacteria_saturates_before_horizon(self):
        samples = list(run_simulation(BACTERIA))
        # Analytic crossing of 999 is at t ≈ 23.004
        assert len(samples) < BACTERIA.n_steps + 1
        assert 22.9 < samples[-1].time < 23.25

    def test_runs_to_horizon_without_saturation(self):
        p = _params(r=0.01, t_max=5.0, dt=0.25)
        samples = list(run_simulation(p))
        assert len(samples) == 21
        assert samples[-1].time == pytest.approx(5.0)

    def test_no_partial_final_step(self):
        p = _params(r=0.01, t_max=1.0, dt=0.3)
        samples = list(run_simulation(p))
        assert len(samples) == 4
        assert samples[-1].time == pytest.approx(0.9)

    def test_horizon_shorter_than_step(self):
        samples = list(run_simulation(_params(t_max=0.05, dt=0.1)))
        assert len(samples) == 1

    @pytest.mark.parametrize("params", [BACTERIA, CITY, FISH,
                                        _params(P0=2000.0),
                                        _params(r=2.0, dt=0.5, t_max=7.0)])
    def test_sample_count_bound(self, params):
        assert len(list(run_simulation(params))) <= params.n_steps + 1

    def test_city_does_not_saturate_within_horizon(self):
        """r=0.03 needs t ≈ 328 to reach 99.9% of K; horizon is 200."""
        samples = list(run_simulation(CITY))
        assert len(samples) == 2001
        assert samples[-1].time == pytest.approx(200.0)
        assert samples[-1].percent_of_capacity == pytest.approx(95.502, abs=0.01)

    def test_logs_saturation(self, caplog):
        with caplog.at_level(logging.INFO, logger="popgrowth.integrator"):
            list(run_simulation(BACTERIA))
        assert any("99.9%" in rec.getMessage() for rec in caplog.records)


# ─── collect_samples / run_batch ──────────────────────────────────────

class TestCollectSamples:
    def test_arrays_match_samples(self):
        result = collect_samples(FISH)
        assert isinstance(result, SimulationResult)
        assert result.n_samples == len(result.times) == len(result.populations)
        np.testing.assert_array_equal(
            result.populations, [s.population for s in result.samples])
        np.testing.assert_array_equal(
            result.percent_of_capacity,
            [s.percent_of_capacity for s in result.samples])

    def test_saturated_run(self):
        result = collect_samples(BACTERIA)
        assert result.saturated
        assert result.saturation_time == result.final_sample.time

    def test_unsaturated_run(self):
        result = collect_samples(CITY)
        assert not result.saturated
        assert result.saturation_time is None

    def test_single_sample_run(self):
        result = collect_samples(_params(P0=1000.0))
        assert result.n_samples == 1
        assert result.saturated
        assert result.saturation_time == 0.0


class TestRunBatch:
    def test_serial_order(self):
        results = run_batch([BACTERIA, FISH])
        assert [r.params for r in results] == [BACTERIA, FISH]

    def test_parallel_matches_serial(self):
        sets = [BACTERIA, CITY, FISH, _params(P0=2000.0)]
        serial = run_batch(sets, workers=1)
        parallel = run_batch(sets, workers=4)
        for s, p in zip(serial, parallel):
            assert s.params == p.params
            assert s.samples == p.samples

    def test_more_workers_than_runs(self):
        results = run_batch([FISH], workers=8)
        assert len(results) == 1

    def test_empty(self):
        assert run_batch([], workers=4) == []
