"""
half_inning.py

Drive the base/out state machine with sampled outcomes until three outs.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from .config import MAX_PLATE_APPEARANCES, OUTS_PER_HALF_INNING
from .pitcher_model import PitcherProfile, sample_outcome, is_out, advances_runners
from .run_expectancy import advance_runners

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HalfInningResult:
    """Outcome of one simulated half-inning."""

    runs: int
    outs: int
    plate_appearances: int
    capped: bool = False


@dataclass
class SimulationDiagnostics:
    """Counters collected across trials (plate appearances, capped trials)."""

    trials: int = 0
    plate_appearances: int = 0
    capped_trials: int = 0

    def record(self, result: HalfInningResult) -> None:
        self.trials += 1
        self.plate_appearances += result.plate_appearances
        if result.capped:
            self.capped_trials += 1

    def as_dict(self) -> Dict[str, float]:
        pa_per_trial = self.plate_appearances / self.trials if self.trials else 0.0
        return {
            "trials": self.trials,
            "plate_appearances": self.plate_appearances,
            "pa_per_trial": pa_per_trial,
            "capped_trials": self.capped_trials,
        }


def simulate_half_inning(
    outs: int,
    base_state: int,
    pitcher: PitcherProfile,
    rng: np.random.Generator,
    diagnostics: Optional[SimulationDiagnostics] = None,
    max_plate_appearances: int = MAX_PLATE_APPEARANCES,
) -> HalfInningResult:
    """
    Simulate the rest of a half-inning from a base/out state.

    Parameters
    ----------
    outs : int
        Outs already recorded (0, 1, 2)
    base_state : int
        Encoded base state (0-7)
    pitcher : PitcherProfile
        Pitcher for every plate appearance
    rng : np.random.Generator
        Random source for the outcome sampler
    diagnostics : SimulationDiagnostics, optional
        Counters to update with this trial
    max_plate_appearances : int
        Safety cap; the trial stops here even without three outs

    Returns
    -------
    HalfInningResult
        Runs allowed, final outs, plate appearances, and whether the cap
        was hit. A capped trial keeps the runs it accumulated.
    """
    runs = 0
    plate_appearances = 0

    while outs < OUTS_PER_HALF_INNING and plate_appearances < max_plate_appearances:
        plate_appearances += 1
        outcome = sample_outcome(pitcher, rng)

        if is_out(outcome):
            outs += 1
        elif advances_runners(outcome):
            base_state, scored = advance_runners(base_state, outcome)
            runs += scored
        else:
            raise ValueError(f"Unknown plate appearance outcome: {outcome!r}")

    capped = outs < OUTS_PER_HALF_INNING
    if capped:
        logger.debug(
            "Half-inning for %s stopped at %d plate appearances (%d outs, %d runs)",
            pitcher.name, plate_appearances, outs, runs,
        )

    result = HalfInningResult(
        runs=runs,
        outs=outs,
        plate_appearances=plate_appearances,
        capped=capped,
    )
    if diagnostics is not None:
        diagnostics.record(result)

    return result
