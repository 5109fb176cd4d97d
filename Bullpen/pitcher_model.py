"""
pitcher_model.py

Pitcher profiles and the per-plate-appearance outcome sampler.

A pitcher's seasonal per-9 rates (K, BB, HR) are turned into per-PA
probabilities; everything else comes from league constants (BABIP, hit-type
split, HBP rate).
"""

import math
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

import numpy as np
import pandas as pd

from .config import (
    PA_PER_NINE,
    LEAGUE_BABIP,
    HIT_TYPE_SPLIT,
    HBP_RATE,
    STRIKEOUT,
    WALK,
    HIT_BY_PITCH,
    SINGLE,
    DOUBLE,
    TRIPLE,
    HOME_RUN,
    OUT_IN_PLAY,
    OUTCOMES,
    OUT_OUTCOMES,
    ADVANCING_OUTCOMES,
)


@dataclass(frozen=True)
class PitcherProfile:
    """Seasonal rate statistics for one candidate pitcher."""

    pitcher_id: str
    name: str
    era: float
    fip: float
    k9: float
    bb9: float
    hr9: float
    throws: str = "R"  # carried for display, not used by the model
    team: Optional[str] = None

    def __post_init__(self):
        for stat in ("era", "fip", "k9", "bb9", "hr9"):
            value = getattr(self, stat)
            if math.isnan(value):
                raise ValueError(f"{self.name}: {stat} is missing")
            if value < 0:
                raise ValueError(f"{self.name}: {stat} must be non-negative")

    @classmethod
    def from_record(cls, record: Mapping) -> "PitcherProfile":
        """Build a profile from a roster row (dict or pandas Series)."""
        team = record.get("team")
        return cls(
            pitcher_id=str(record["pitcher_id"]),
            name=str(record["name"]),
            era=float(record["era"]),
            fip=float(record["fip"]),
            k9=float(record["k9"]),
            bb9=float(record["bb9"]),
            hr9=float(record["hr9"]),
            throws=str(record.get("throws", "R")),
            team=None if pd.isna(team) else str(team),
        )


def per_pa_rates(pitcher: PitcherProfile) -> Dict[str, float]:
    """Per-plate-appearance K, BB, HBP and HR rates, in sampling order."""
    return {
        STRIKEOUT: pitcher.k9 / PA_PER_NINE,
        WALK: pitcher.bb9 / PA_PER_NINE,
        HIT_BY_PITCH: HBP_RATE,
        HOME_RUN: pitcher.hr9 / PA_PER_NINE,
    }


def outcome_probabilities(pitcher: PitcherProfile) -> Dict[str, float]:
    """
    Exact probability of each outcome under sample_outcome().

    Parameters
    ----------
    pitcher : PitcherProfile
        Candidate pitcher

    Returns
    -------
    dict
        Maps every outcome in OUTCOMES to its probability. Values sum to 1.
        If the K/BB/HBP/HR rates add up to more than 1, the later categories
        lose mass exactly as the cumulative draw would cut them off.
    """
    probs = {outcome: 0.0 for outcome in OUTCOMES}

    # First draw: cumulative thresholds, truncated at 1
    cum = 0.0
    prev_threshold = 0.0
    for outcome, p in per_pa_rates(pitcher).items():
        cum += p
        threshold = min(cum, 1.0)
        probs[outcome] += threshold - prev_threshold
        prev_threshold = threshold

    # Second and third draws: ball in play
    p_in_play = 1.0 - prev_threshold
    p_hit = p_in_play * LEAGUE_BABIP
    for hit_type, share in HIT_TYPE_SPLIT.items():
        probs[hit_type] += p_hit * share
    probs[HOME_RUN] += p_hit * (1.0 - sum(HIT_TYPE_SPLIT.values()))
    probs[OUT_IN_PLAY] += p_in_play * (1.0 - LEAGUE_BABIP)

    return probs


def sample_outcome(pitcher: PitcherProfile, rng: np.random.Generator) -> str:
    """
    Draw one plate appearance outcome.

    Three independent uniform draws, always in this order:

    1. strikeout, walk, HBP, home run by cumulative probability
    2. ball in play: hit vs. out against league BABIP
    3. hit type by the single/double/triple split; leftover mass is a
       home run

    Parameters
    ----------
    pitcher : PitcherProfile
        Pitcher on the mound
    rng : np.random.Generator
        Random source

    Returns
    -------
    str
        One of OUTCOMES
    """
    roll = rng.random()
    cum = 0.0
    for outcome, p in per_pa_rates(pitcher).items():
        cum += p
        if roll < cum:
            return outcome

    if rng.random() >= LEAGUE_BABIP:
        return OUT_IN_PLAY

    hit_roll = rng.random()
    cum = 0.0
    for hit_type, share in HIT_TYPE_SPLIT.items():
        cum += share
        if hit_roll < cum:
            return hit_type
    return HOME_RUN


def is_out(outcome: str) -> bool:
    """True if the outcome records an out."""
    return outcome in OUT_OUTCOMES


def advances_runners(outcome: str) -> bool:
    """True if the outcome goes through the advancement rules."""
    return outcome in ADVANCING_OUTCOMES


def expected_runs_per_inning(pitcher: PitcherProfile) -> float:
    """Blend of ERA (actual) and FIP (expected), per inning."""
    return (pitcher.era + pitcher.fip) / 2 / 9
