"""
Bullpen Decision Simulator

Simulates the rest of a half-inning for each candidate relief pitcher and
ranks the candidates by the pitching team's expected win probability.
"""

from .config import (
    BASE_STATE_NAMES,
    OUTCOMES,
    DEFAULT_ITERATIONS,
    MAX_PLATE_APPEARANCES,
)
from .run_expectancy import (
    RUN_EXPECTANCY_MATRIX,
    get_run_expectancy,
    advance_runners,
    runners_to_base_state,
    base_state_to_runners,
)
from .pitcher_model import PitcherProfile, outcome_probabilities, sample_outcome
from .half_inning import simulate_half_inning, HalfInningResult, SimulationDiagnostics
from .win_probability import (
    GameSituation,
    win_probability,
    project_after_half_inning,
    inverse_win_probability,
)
from .simulation_engine import (
    SimulationResult,
    simulate_pitcher,
    compare_options,
    results_to_frame,
)

__all__ = [
    "BASE_STATE_NAMES",
    "OUTCOMES",
    "DEFAULT_ITERATIONS",
    "MAX_PLATE_APPEARANCES",
    "RUN_EXPECTANCY_MATRIX",
    "get_run_expectancy",
    "advance_runners",
    "runners_to_base_state",
    "base_state_to_runners",
    "PitcherProfile",
    "outcome_probabilities",
    "sample_outcome",
    "simulate_half_inning",
    "HalfInningResult",
    "SimulationDiagnostics",
    "GameSituation",
    "win_probability",
    "project_after_half_inning",
    "inverse_win_probability",
    "SimulationResult",
    "simulate_pitcher",
    "compare_options",
    "results_to_frame",
]
