"""
win_probability.py

Closed-form win probability approximation for a game situation.

All probabilities are from the perspective of the team whose bullpen
decision is being evaluated: the team pitching in the situation handed to
the simulator. A logistic curve on run differential is scaled by innings
remaining, with a small home bonus in close late games and damped swings in
extra innings.
"""

import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from .config import (
    BASE_NAMES,
    REGULATION_INNINGS,
    WP_LOGISTIC_SCALE,
    MIN_INNINGS_REMAINING,
    HOME_LATE_BONUS,
    EXTRA_INNING_DAMPING,
    WP_FLOOR,
    WP_CEILING,
)
from .run_expectancy import runners_to_base_state


@dataclass(frozen=True)
class GameSituation:
    """
    Snapshot of the game at the moment of the pitching decision.

    The home team pitches the bottom half of an inning, so ``home_pitching``
    also tells which half is in progress.
    """

    inning: int
    outs: int
    home_score: int
    away_score: int
    home_pitching: bool
    runners: Tuple[str, ...] = ()

    def __post_init__(self):
        runners_to_base_state(self.runners)  # rejects unknown base names
        # Stored in base order, without duplicates
        occupied = set(self.runners)
        object.__setattr__(self, "runners", tuple(base for base in BASE_NAMES if base in occupied))

    @property
    def base_state(self) -> int:
        return runners_to_base_state(self.runners)

    @property
    def is_top_half(self) -> bool:
        return not self.home_pitching

    @property
    def pitching_run_diff(self) -> int:
        """Pitching team's score minus the batting team's."""
        if self.home_pitching:
            return self.home_score - self.away_score
        return self.away_score - self.home_score


def _logistic_k(innings_remaining: float) -> float:
    return WP_LOGISTIC_SCALE * math.sqrt(max(innings_remaining, MIN_INNINGS_REMAINING))


def innings_remaining(inning: int, outs: int) -> float:
    """Fractional regulation innings left, as used by the logistic slope."""
    return REGULATION_INNINGS - inning + outs / 3


def win_probability_core(run_diff: float, innings_left: float) -> float:
    """Logistic core: 1 / (1 + e^(-k * diff)), k = 0.14 * sqrt(innings left)."""
    k = _logistic_k(innings_left)
    return 1.0 / (1.0 + math.exp(-k * run_diff))


def win_probability(
    situation: GameSituation,
    home_perspective: Optional[bool] = None,
) -> float:
    """
    Win probability for one side in a game situation.

    Parameters
    ----------
    situation : GameSituation
        Current game state
    home_perspective : bool, optional
        True for the home team's probability, False for the away team's.
        Defaults to the team currently pitching.

    Returns
    -------
    float
        Win probability clamped to [0.01, 0.99]
    """
    if home_perspective is None:
        home_perspective = situation.home_pitching

    if home_perspective:
        run_diff = situation.home_score - situation.away_score
    else:
        run_diff = situation.away_score - situation.home_score

    wp = win_probability_core(run_diff, innings_remaining(situation.inning, situation.outs))

    # Home team edge in a close game from the 9th on
    if home_perspective and situation.inning >= REGULATION_INNINGS and abs(run_diff) <= 1:
        wp += HOME_LATE_BONUS

    # Extra innings: compress toward 50-50
    if situation.inning > REGULATION_INNINGS:
        wp = 0.5 + (wp - 0.5) * EXTRA_INNING_DAMPING

    return max(WP_FLOOR, min(WP_CEILING, wp))


def advance_situation(situation: GameSituation, runs_allowed: int) -> GameSituation:
    """
    Situation at the start of the next half-inning.

    Runs are credited to the batting team, the sides switch, and the inning
    number goes up when the bottom half (home team pitching) ends. Outs and
    bases reset.
    """
    if runs_allowed < 0:
        raise ValueError(f"runs_allowed must be non-negative, got {runs_allowed}")

    if situation.home_pitching:
        home_score, away_score = situation.home_score, situation.away_score + runs_allowed
        inning = situation.inning + 1
    else:
        home_score, away_score = situation.home_score + runs_allowed, situation.away_score
        inning = situation.inning

    return replace(
        situation,
        inning=inning,
        outs=0,
        home_score=home_score,
        away_score=away_score,
        home_pitching=not situation.home_pitching,
        runners=(),
    )


def project_after_half_inning(situation: GameSituation, runs_allowed: int) -> float:
    """
    Win probability of the pitching team once its half-inning is over.

    Parameters
    ----------
    situation : GameSituation
        Situation when the pitcher entered
    runs_allowed : int
        Runs allowed over the rest of the half-inning

    Returns
    -------
    float
        Pitching team's win probability at the start of the next half-inning
    """
    next_situation = advance_situation(situation, runs_allowed)
    return win_probability(next_situation, home_perspective=situation.home_pitching)


def inverse_win_probability(target_wp: float, innings_left: float) -> float:
    """
    Run differential that gives a target win probability.

    Inverts the logistic core only; the home bonus and extra-inning damping
    are ignored.
    """
    if not 0.0 < target_wp < 1.0:
        raise ValueError(f"target_wp must be strictly between 0 and 1, got {target_wp}")

    k = _logistic_k(innings_left)
    return -math.log(1.0 / target_wp - 1.0) / k


def win_probability_frame(states_df: pd.DataFrame) -> np.ndarray:
    """
    Vectorized win probability for many situations.

    Parameters
    ----------
    states_df : pd.DataFrame
        DataFrame with columns: inning, outs, home_score, away_score,
        home_pitching

    Returns
    -------
    np.ndarray
        Win probability of the pitching team for each row
    """
    inning = states_df["inning"].to_numpy(dtype=np.float64)
    outs = states_df["outs"].to_numpy(dtype=np.float64)
    home = states_df["home_pitching"].to_numpy(dtype=bool)
    diff = (states_df["home_score"] - states_df["away_score"]).to_numpy(dtype=np.float64)
    diff = np.where(home, diff, -diff)

    remaining = REGULATION_INNINGS - inning + outs / 3
    k = WP_LOGISTIC_SCALE * np.sqrt(np.maximum(remaining, MIN_INNINGS_REMAINING))
    wp = 1.0 / (1.0 + np.exp(-k * diff))

    bonus = home & (inning >= REGULATION_INNINGS) & (np.abs(diff) <= 1)
    wp = wp + np.where(bonus, HOME_LATE_BONUS, 0.0)

    extra = inning > REGULATION_INNINGS
    wp = np.where(extra, 0.5 + (wp - 0.5) * EXTRA_INNING_DAMPING, wp)

    return np.clip(wp, WP_FLOOR, WP_CEILING)
