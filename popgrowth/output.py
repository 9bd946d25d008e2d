"""Reporting and persistence for simulation samples.

Consumers of the sample stream; nothing here touches the integrator state.
  - write_csv: every sample, header Time,Population,GrowthRate,PercentageOfK
  - format_table: console table, every Nth sample
  - format_parameters / format_analysis / format_saturation: report blocks

Formatters return strings; printing is left to the caller.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Union

from popgrowth.integrator import SimulationResult
from popgrowth.types import ModelAnalysis, SimulationParameters, SimulationSample

CSV_HEADER = ("Time", "Population", "GrowthRate", "PercentageOfK")

INTERPRETATION_NOTES = (
    "- S-shaped curve indicates logistic growth",
    "- Growth is fast at first and slows down approaching K",
    "- Carrying capacity is the upper bound of the population",
    "- Maximum growth rate occurs at P = K/2",
)

_RULE = "=" * 38


# ═══════════════════════════════════════════════════════════════════════
# CSV
# ═══════════════════════════════════════════════════════════════════════

def write_csv(samples: Iterable[SimulationSample], path: Union[str, Path]) -> int:
    """Write samples to CSV, four decimals per field.

    Consumes ``samples`` lazily, so a generator from ``run_simulation``
    is streamed straight to disk.

    Returns:
        Number of data rows written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    n_rows = 0
    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for sample in samples:
            writer.writerow([f"{v:.4f}" for v in sample.as_row()])
            n_rows += 1
    return n_rows


# ═══════════════════════════════════════════════════════════════════════
# CONSOLE REPORTS
# ═══════════════════════════════════════════════════════════════════════

def format_table(samples: Iterable[SimulationSample], every: int = 10) -> str:
    """Fixed-width table of every ``every``-th sample (index 0 included)."""
    lines = [
        f"{'Time':<10} {'Population':<15} {'Growth Rate':<15} {'% of K':<15}",
        f"{'----':<10} {'----------':<15} {'-----------':<15} {'------':<15}",
    ]
    for i, s in enumerate(samples):
        if i % every == 0:
            lines.append(
                f"{s.time:<10.2f} {s.population:<15.2f} "
                f"{s.growth_rate:<15.4f} {s.percent_of_capacity:<15.2f}%"
            )
    return '\n'.join(lines)


def format_parameters(params: SimulationParameters) -> str:
    return '\n'.join([
        "=== POPULATION GROWTH SIMULATION ===",
        "Model: Logistic Growth (dP/dt = r*P*(1-P/K))",
        "Parameters:",
        f"- Growth rate (r): {params.growth_rate:.4f}",
        f"- Carrying capacity (K): {params.carrying_capacity:.0f}",
        f"- Initial population (P0): {params.initial_population:.0f}",
        f"- Simulation time (t_max): {params.max_time:.2f}",
        f"- Time step (dt): {params.step_size:.4f}",
    ])


def format_analysis(analysis: ModelAnalysis) -> str:
    """Analysis block; the half-capacity line appears only when defined."""
    _, K = analysis.equilibria
    lines = [
        "=== MODEL ANALYSIS ===",
        "Equilibrium points:",
        "- P = 0 (extinction)",
        f"- P = K = {K:.0f} (carrying capacity)",
        "",
    ]
    if analysis.half_capacity_time is not None:
        lines.append(
            f"Time to reach 50% of carrying capacity: "
            f"{analysis.half_capacity_time:.2f} time units"
        )
    lines.append(
        f"Maximum growth rate: {analysis.max_growth_rate:.4f} "
        f"at P = {analysis.max_growth_population:.0f}"
    )
    return '\n'.join(lines)


def format_saturation(result: SimulationResult) -> str:
    """Notice for a run that stopped at 99.9% of K; empty otherwise."""
    if not result.saturated:
        return ""
    return (f">>> Population reached 99.9% of carrying capacity "
            f"at t = {result.saturation_time:.2f}")


def format_interpretation() -> str:
    return '\n'.join(["=== INTERPRETATION ===", *INTERPRETATION_NOTES])


def banner(title: str = "POPULATION GROWTH SIMULATION",
           subtitle: str = "Logistic Growth Model") -> str:
    return '\n'.join([_RULE, f"  {title}", f"  {subtitle}", _RULE])
