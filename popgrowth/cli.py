"""Command-line front end for popgrowth.

Usage:
    popgrowth run --scenario bacteria
    popgrowth run --config configs/default.yaml --r 0.3 --csv out/pop.csv
    popgrowth run --K 500 --P0 20 --r 0.2 --plot out/fish.png --no-csv
    popgrowth scenarios
    popgrowth interactive

Invalid parameters are reported on stderr with exit code 1.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional

from popgrowth import __version__
from popgrowth.analysis import analyze_model
from popgrowth.config import (
    SCENARIOS,
    PopulationConfig,
    build_config,
    config_to_parameters,
    deep_merge,
    load_config,
)
from popgrowth.integrator import collect_samples
from popgrowth.logging_config import setup_logging
from popgrowth.output import (
    banner,
    format_analysis,
    format_interpretation,
    format_parameters,
    format_saturation,
    format_table,
    write_csv,
)

logger = logging.getLogger(__name__)

# (prompt, YAML section, key)
PROMPTS = [
    ("Enter growth rate (r) [e.g. 0.1]: ", 'model', 'growth_rate'),
    ("Enter carrying capacity (K) [e.g. 1000]: ", 'model', 'carrying_capacity'),
    ("Enter initial population (P0) [e.g. 50]: ", 'model', 'initial_population'),
    ("Enter maximum simulation time [e.g. 50]: ", 'simulation', 'max_time'),
    ("Enter step size (dt) [e.g. 0.1]: ", 'simulation', 'step_size'),
]


# ═══════════════════════════════════════════════════════════════════════
# ARGUMENT PARSING
# ═══════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='popgrowth',
        description='Logistic population growth simulated with RK4.',
    )
    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {__version__}')
    sub = parser.add_subparsers(dest='command', required=True)

    run = sub.add_parser('run', help='Run a simulation and report results')
    source = run.add_mutually_exclusive_group()
    source.add_argument('--scenario', choices=sorted(SCENARIOS),
                        help='Use a built-in preset')
    source.add_argument('--config', help='Base YAML configuration file')
    _add_common_options(run)
    run.add_argument('--r', type=float, dest='growth_rate',
                     help='Intrinsic growth rate')
    run.add_argument('--K', type=float, dest='carrying_capacity',
                     help='Carrying capacity')
    run.add_argument('--P0', type=float, dest='initial_population',
                     help='Initial population')
    run.add_argument('--t-max', type=float, dest='max_time',
                     help='Simulation horizon')
    run.add_argument('--dt', type=float, dest='step_size',
                     help='Integration step size')

    sub.add_parser('scenarios', help='List built-in scenario presets')

    interactive = sub.add_parser('interactive',
                                 help='Prompt for parameters and run')
    _add_common_options(interactive)

    return parser


def _add_common_options(p: argparse.ArgumentParser) -> None:
    p.add_argument('--csv', dest='csv_path', help='CSV output path')
    p.add_argument('--no-csv', action='store_true',
                   help='Do not write the CSV file')
    p.add_argument('--every', type=int, dest='display_every',
                   help='Print every Nth sample in the table')
    p.add_argument('--plot', dest='plot_path',
                   help='Save a trajectory plot (PNG) to this path')
    p.add_argument('-v', '--verbose', action='store_true',
                   help='Debug logging')


def overrides_from_args(args: argparse.Namespace) -> Dict:
    """Collect explicitly given CLI flags into a YAML-shaped override dict."""
    layout = {
        'model': ('growth_rate', 'carrying_capacity', 'initial_population'),
        'simulation': ('max_time', 'step_size'),
        'output': ('csv_path', 'display_every', 'plot_path'),
    }
    overrides: Dict[str, Dict] = {}
    for section, keys in layout.items():
        for key in keys:
            value = getattr(args, key, None)
            if value is not None:
                overrides.setdefault(section, {})[key] = value
    if getattr(args, 'no_csv', False):
        overrides.setdefault('output', {})['write_csv'] = False
    return overrides


def prompt_parameters(input_fn: Callable[[str], str] = input) -> Dict:
    """Ask for the five parameters; returns a YAML-shaped override dict.

    Raises:
        ValueError: If an answer is not a number or input ends early.
    """
    values: Dict[str, Dict] = {}
    for prompt, section, key in PROMPTS:
        try:
            answer = input_fn(prompt).strip()
        except EOFError:
            raise ValueError(f"{key}: no input") from None
        try:
            values.setdefault(section, {})[key] = float(answer)
        except ValueError:
            raise ValueError(f"{key} must be a number, got '{answer}'") from None
    return values


# ═══════════════════════════════════════════════════════════════════════
# COMMANDS
# ═══════════════════════════════════════════════════════════════════════

def run_report(config: PopulationConfig) -> int:
    """Analyze, simulate and report one validated configuration."""
    params = config_to_parameters(config)
    analysis = analyze_model(params)

    print(format_analysis(analysis))
    print()
    print(format_parameters(params))
    print()

    result = collect_samples(params)
    print(format_table(result.samples, every=config.output.display_every))

    notice = format_saturation(result)
    if notice:
        print()
        print(notice)

    if config.output.write_csv:
        n_rows = write_csv(result.samples, config.output.csv_path)
        logger.debug("Wrote %d rows to %s", n_rows, config.output.csv_path)
        print(f"\nSimulation data saved to: {config.output.csv_path}")

    if config.output.plot_path:
        from popgrowth.viz import plot_population_trajectory
        plot_population_trajectory(result, analysis,
                                   save_path=config.output.plot_path)
        print(f"Trajectory plot saved to: {config.output.plot_path}")

    print()
    print(format_interpretation())
    return 0


def list_scenarios() -> int:
    print("=== EXAMPLE SCENARIOS ===")
    for i, (name, preset) in enumerate(SCENARIOS.items(), start=1):
        m, s = preset['model'], preset['simulation']
        print(f"{i}. {preset['description']} ({name}):")
        print(f"   r = {m['growth_rate']:g}, K = {m['carrying_capacity']:g}, "
              f"P0 = {m['initial_population']:g}, t_max = {s['max_time']:g}, "
              f"dt = {s['step_size']:g}")
    return 0


def main(argv: Optional[List[str]] = None,
         input_fn: Callable[[str], str] = input) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == 'scenarios':
        return list_scenarios()

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    print(banner())

    try:
        overrides = overrides_from_args(args)
        if args.command == 'interactive':
            print("=== MODEL PARAMETER INPUT ===")
            config = build_config(
                overrides=deep_merge(prompt_parameters(input_fn), overrides))
        elif args.config:
            config = load_config(args.config, overrides=overrides)
        else:
            config = build_config(scenario=args.scenario, overrides=overrides)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return run_report(config)