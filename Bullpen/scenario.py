"""
scenario.py

Roster loading and scenario validation around the simulation engine.

The engine assumes clean inputs; this module is where malformed scenarios
and unknown pitcher identifiers are rejected.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from .config import (
    PITCHERS_FILE,
    BASE_NAMES,
    MIN_INNING,
    MAX_INNING,
    OUTS,
    MIN_CANDIDATES,
    MAX_CANDIDATES,
    DEFAULT_ITERATIONS,
    MIN_ITERATIONS,
    MAX_ITERATIONS,
)
from .pitcher_model import PitcherProfile
from .win_probability import GameSituation

PITCHER_COLUMNS = ["pitcher_id", "name", "team", "throws", "era", "fip", "k9", "bb9", "hr9"]
STAT_COLUMNS = ["era", "fip", "k9", "bb9", "hr9"]


class ScenarioValidationError(ValueError):
    """Scenario input outside the accepted ranges."""


class PitcherNotFoundError(LookupError):
    """One or more requested pitcher identifiers are not in the roster."""

    def __init__(self, missing: Sequence[str]):
        self.missing = list(missing)
        super().__init__(f"Pitcher(s) not found: {', '.join(self.missing)}")


def load_pitchers(path: Optional[Path] = None) -> pd.DataFrame:
    """
    Load the reliever roster.

    Parameters
    ----------
    path : Path, optional
        CSV file with columns pitcher_id, name, team, throws, era, fip,
        k9, bb9, hr9. Defaults to PITCHERS_FILE.

    Returns
    -------
    pd.DataFrame
        Roster sorted by ERA (best first)
    """
    path = Path(path) if path is not None else PITCHERS_FILE
    if not path.exists():
        raise FileNotFoundError(f"Pitcher roster not found at {path}")

    roster = pd.read_csv(path, dtype={"pitcher_id": str})

    missing_cols = [col for col in PITCHER_COLUMNS if col not in roster.columns]
    if missing_cols:
        raise ValueError(f"Roster {path} is missing columns: {', '.join(missing_cols)}")

    incomplete = roster[STAT_COLUMNS].isna().any(axis=1)
    if incomplete.any():
        ids = roster.loc[incomplete, "pitcher_id"].tolist()
        raise ValueError(f"Missing stats in {path} for pitcher ids: {', '.join(map(str, ids))}")

    if roster["pitcher_id"].duplicated().any():
        dupes = roster.loc[roster["pitcher_id"].duplicated(), "pitcher_id"].tolist()
        raise ValueError(f"Duplicate pitcher ids in {path}: {', '.join(dupes)}")

    return roster.sort_values("era", kind="stable").reset_index(drop=True)


def resolve_pitchers(pitcher_ids: Iterable[str], roster: pd.DataFrame) -> List[PitcherProfile]:
    """
    Look up pitcher profiles by identifier, in the order requested.

    Raises
    ------
    PitcherNotFoundError
        If any identifier is not in the roster
    """
    pitcher_ids = [str(pid) for pid in pitcher_ids]
    by_id = roster.set_index("pitcher_id", drop=False)

    missing = [pid for pid in pitcher_ids if pid not in by_id.index]
    if missing:
        raise PitcherNotFoundError(missing)

    return [PitcherProfile.from_record(by_id.loc[pid]) for pid in pitcher_ids]


def validate_iterations(iterations: Optional[int]) -> int:
    """Trial count, defaulting to DEFAULT_ITERATIONS; must be 100-10,000."""
    if iterations is None:
        return DEFAULT_ITERATIONS
    if not MIN_ITERATIONS <= iterations <= MAX_ITERATIONS:
        raise ScenarioValidationError(
            f"iterations must be between {MIN_ITERATIONS} and {MAX_ITERATIONS}, got {iterations}"
        )
    return iterations


def validate_pitcher_ids(pitcher_ids: Sequence[str]) -> List[str]:
    """Between 2 and 6 distinct pitcher identifiers."""
    pitcher_ids = [str(pid) for pid in pitcher_ids]
    if not MIN_CANDIDATES <= len(pitcher_ids) <= MAX_CANDIDATES:
        raise ScenarioValidationError(
            f"Choose between {MIN_CANDIDATES} and {MAX_CANDIDATES} pitchers, got {len(pitcher_ids)}"
        )
    if len(set(pitcher_ids)) != len(pitcher_ids):
        raise ScenarioValidationError(f"Duplicate pitcher ids: {pitcher_ids}")
    return pitcher_ids


def validate_scenario(
    inning: int,
    outs: int,
    home_score: int,
    away_score: int,
    home_pitching: bool,
    runners: Iterable[str] = (),
) -> GameSituation:
    """
    Check scenario ranges and build the engine's GameSituation.

    Parameters
    ----------
    inning : int
        Inning number (1-15)
    outs : int
        Outs (0, 1, 2)
    home_score, away_score : int
        Non-negative scores
    home_pitching : bool
        True if the home team is pitching (bottom half)
    runners : iterable of str
        Occupied bases: "first", "second", "third"

    Returns
    -------
    GameSituation

    Raises
    ------
    ScenarioValidationError
        If any field is out of range
    """
    errors = []
    if not MIN_INNING <= inning <= MAX_INNING:
        errors.append(f"inning must be between {MIN_INNING} and {MAX_INNING}, got {inning}")
    if outs not in OUTS:
        errors.append(f"outs must be 0, 1 or 2, got {outs}")
    if home_score < 0 or away_score < 0:
        errors.append(f"scores must be non-negative, got {home_score}-{away_score}")

    runners = list(runners)
    unknown = [base for base in runners if base not in BASE_NAMES]
    if unknown:
        errors.append(f"unknown bases {unknown}; expected any of {BASE_NAMES}")

    if errors:
        raise ScenarioValidationError("; ".join(errors))

    return GameSituation(
        inning=inning,
        outs=outs,
        home_score=home_score,
        away_score=away_score,
        home_pitching=bool(home_pitching),
        runners=tuple(runners),
    )
