"""popgrowth: Logistic population growth integrated with fixed-step RK4.

Solves dP/dt = r·P·(1 − P/K) over a fixed horizon:
  - Model: instantaneous logistic growth rate
  - Integrator: classical RK4 stepping with early stop at 99.9% of K
  - Analyzer: equilibria, half-capacity time, maximum growth rate
  - Output: console table, CSV record, trajectory plots
"""

__version__ = "0.1.0"

from popgrowth.analysis import analyze_model  # noqa: F401
from popgrowth.integrator import (  # noqa: F401
    SimulationResult,
    collect_samples,
    rk4_step,
    run_batch,
    run_simulation,
)
from popgrowth.model import logistic_growth_rate  # noqa: F401
from popgrowth.types import (  # noqa: F401
    SATURATION_FRACTION,
    ModelAnalysis,
    SimulationParameters,
    SimulationSample,
)
