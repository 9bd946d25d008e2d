"""Configuration system for popgrowth.

Hierarchical YAML configuration with deep-merge support:
  base.yaml → scenario preset → overrides (CLI flags, sweeps)

Validation happens here, at the boundary. The numeric core
(model/integrator/analysis) assumes validated parameters:
  - any of r, K, P0, t_max, dt ≤ 0 (or non-finite) → ValueError
  - P0 ≥ K → UserWarning (run still proceeds; population decays to K)
"""

from __future__ import annotations

import dataclasses
import math
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from popgrowth.types import SimulationParameters


# ═══════════════════════════════════════════════════════════════════════
# CONFIGURATION DATACLASSES
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class ModelSection:
    """Logistic model parameters."""
    growth_rate: float = 0.5            # r (time⁻¹)
    carrying_capacity: float = 1000.0   # K (individuals)
    initial_population: float = 10.0    # P0 (individuals)


@dataclass
class SimulationSection:
    """Integration horizon and step."""
    max_time: float = 50.0     # t_max
    step_size: float = 0.1     # dt


@dataclass
class OutputSection:
    """Output control."""
    csv_path: str = "population_data.csv"
    write_csv: bool = True
    display_every: int = 10             # print every Nth sample in the table
    plot_path: Optional[str] = None     # PNG trajectory plot; None = no plot


@dataclass
class PopulationConfig:
    """Complete run configuration.

    Load from YAML via `load_config()`. Sections map 1:1 to YAML top-level keys.
    """
    model: ModelSection = field(default_factory=ModelSection)
    simulation: SimulationSection = field(default_factory=SimulationSection)
    output: OutputSection = field(default_factory=OutputSection)


# ═══════════════════════════════════════════════════════════════════════
# SCENARIO PRESETS
# ═══════════════════════════════════════════════════════════════════════

# name → (description, YAML-shaped override dict)
SCENARIOS: Dict[str, Dict[str, Any]] = {
    'bacteria': {
        'description': 'Bacterial growth',
        'model': {'growth_rate': 0.5, 'carrying_capacity': 1000.0,
                  'initial_population': 10.0},
        'simulation': {'max_time': 50.0, 'step_size': 0.1},
    },
    'city': {
        'description': 'City population growth',
        'model': {'growth_rate': 0.03, 'carrying_capacity': 100000.0,
                  'initial_population': 5000.0},
        'simulation': {'max_time': 200.0, 'step_size': 0.1},
    },
    'fish': {
        'description': 'Fish in a pond',
        'model': {'growth_rate': 0.2, 'carrying_capacity': 500.0,
                  'initial_population': 20.0},
        'simulation': {'max_time': 50.0, 'step_size': 0.1},
    },
}


# ═══════════════════════════════════════════════════════════════════════
# YAML LOADING & MERGING
# ═══════════════════════════════════════════════════════════════════════

def deep_merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge override into base. Modifies base in place.

    - Dict values are merged recursively
    - Non-dict values are replaced
    - Keys in override but not base are added

    Returns:
        The merged base dictionary.
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _dict_to_section(section_cls, data: Dict) -> Any:
    """Convert a dict to a dataclass, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(section_cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}
    return section_cls(**filtered)


def _yaml_to_config(data: Dict) -> PopulationConfig:
    """Convert a merged YAML dict to a PopulationConfig."""
    sections = {}
    section_map = {
        'model': ModelSection,
        'simulation': SimulationSection,
        'output': OutputSection,
    }
    for key, cls in section_map.items():
        if key in data and isinstance(data[key], dict):
            sections[key] = _dict_to_section(cls, data[key])
        else:
            sections[key] = cls()
    return PopulationConfig(**sections)


def _scenario_overrides(name: str) -> Dict:
    if name not in SCENARIOS:
        raise KeyError(
            f"Unknown scenario '{name}'. "
            f"Available: {', '.join(sorted(SCENARIOS))}"
        )
    preset = SCENARIOS[name]
    return {k: dict(v) for k, v in preset.items() if isinstance(v, dict)}


# ═══════════════════════════════════════════════════════════════════════
# VALIDATION
# ═══════════════════════════════════════════════════════════════════════

def validate_parameters(params: SimulationParameters) -> None:
    """Check the run preconditions. Raises ValueError on failure.

    Checks:
      - r, K, P0, t_max, dt are finite and strictly positive
      - P0 < K (warning only)
    """
    for name in ('growth_rate', 'carrying_capacity', 'initial_population',
                 'max_time', 'step_size'):
        value = getattr(params, name)
        if not math.isfinite(value):
            raise ValueError(f"{name} must be finite, got {value}")
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")

    if params.initial_population >= params.carrying_capacity:
        warnings.warn(
            f"initial_population ({params.initial_population}) >= "
            f"carrying_capacity ({params.carrying_capacity}); "
            f"population will decline toward K.",
            UserWarning,
            stacklevel=2,
        )


def validate_config(config: PopulationConfig) -> None:
    """Validate configuration constraints. Raises ValueError on failure."""
    validate_parameters(config_to_parameters(config))

    every = config.output.display_every
    if isinstance(every, bool) or not isinstance(every, int):
        raise ValueError(
            f"output.display_every must be an integer, got {every!r}"
        )
    if every < 1:
        raise ValueError(
            f"output.display_every must be >= 1, got {every}"
        )


def config_to_parameters(config: PopulationConfig) -> SimulationParameters:
    """Extract the immutable run parameters from a config.

    Raises:
        ValueError: If a value cannot be read as a number (e.g. a YAML null).
    """
    values = {}
    for section, names in (
        ('model', ('growth_rate', 'carrying_capacity', 'initial_population')),
        ('simulation', ('max_time', 'step_size')),
    ):
        for name in names:
            value = getattr(getattr(config, section), name)
            try:
                values[name] = float(value)
            except (TypeError, ValueError):
                raise ValueError(
                    f"{section}.{name} must be a number, got {value!r}"
                ) from None
    return SimulationParameters(**values)


# ═══════════════════════════════════════════════════════════════════════
# ENTRY POINTS
# ═══════════════════════════════════════════════════════════════════════

def load_config(
    base_path: Union[str, Path],
    scenario: Optional[str] = None,
    overrides: Optional[Dict] = None,
) -> PopulationConfig:
    """Load and merge hierarchical YAML configuration.

    Merge order: base → scenario preset → overrides.
    Each layer overrides only the fields it specifies.

    Args:
        base_path: Path to base configuration YAML.
        scenario: Optional preset name from SCENARIOS.
        overrides: Optional dict of overrides (e.g. from CLI flags).

    Returns:
        Validated PopulationConfig.

    Raises:
        FileNotFoundError: If base_path doesn't exist.
        KeyError: If scenario is not a known preset.
        ValueError: If the file is not valid YAML or validation fails.
    """
    base_path = Path(base_path)
    if not base_path.exists():
        raise FileNotFoundError(f"Config file not found: {base_path}")

    with open(base_path) as f:
        try:
            config_dict = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {base_path}: {e}") from None

    if not isinstance(config_dict, dict):
        raise ValueError(
            f"Config file {base_path} must contain a mapping at the top level"
        )

    if scenario is not None:
        deep_merge(config_dict, _scenario_overrides(scenario))

    if overrides is not None:
        deep_merge(config_dict, overrides)

    config = _yaml_to_config(config_dict)
    validate_config(config)
    return config


def build_config(
    scenario: Optional[str] = None,
    overrides: Optional[Dict] = None,
) -> PopulationConfig:
    """Build a validated config without a YAML file.

    Merge order: defaults → scenario preset → overrides.
    """
    config_dict = _scenario_overrides(scenario) if scenario is not None else {}
    if overrides is not None:
        deep_merge(config_dict, overrides)
    config = _yaml_to_config(config_dict)
    validate_config(config)
    return config


def default_config() -> PopulationConfig:
    """Return a PopulationConfig with all default values."""
    config = PopulationConfig()
    validate_config(config)
    return config
