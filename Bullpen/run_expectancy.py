"""
run_expectancy.py

Base/out state machine: run expectancy reference table, base state encoding
and the deterministic runner advancement rules used by the simulator.

Base states are integers 0-7 with bit 0 = 1B, bit 1 = 2B, bit 2 = 3B.
"""

from typing import Iterable, List, Tuple

import numpy as np
import pandas as pd

from .config import (
    BASE_BITS,
    BASE_NAMES,
    BASE_STATE_NAMES,
    OUTS,
    OUTS_PER_HALF_INNING,
    WALK,
    HIT_BY_PITCH,
    SINGLE,
    DOUBLE,
    TRIPLE,
    HOME_RUN,
)


# Mean runs scored from each base/out state to the end of the half-inning
# (MLB 2015-2023 averages), indexed [outs, base_state]
RUN_EXPECTANCY_MATRIX = np.array([
    [0.481, 0.859, 1.100, 1.426, 1.329, 1.784, 1.946, 2.292],
    [0.254, 0.509, 0.664, 0.908, 0.897, 1.140, 1.352, 1.541],
    [0.098, 0.214, 0.305, 0.343, 0.354, 0.413, 0.570, 0.736],
])
RUN_EXPECTANCY_MATRIX.setflags(write=False)


def _check_base_state(base_state: int) -> None:
    if not 0 <= base_state <= 7:
        raise ValueError(f"base_state must be in 0-7, got {base_state}")


def get_run_expectancy(outs: int, base_state: int) -> float:
    """
    Look up expected runs to the end of the half-inning.

    Parameters
    ----------
    outs : int
        Number of outs (0, 1, 2, or 3 for a finished half-inning)
    base_state : int
        Encoded base state (0-7)

    Returns
    -------
    float
        Historical mean runs scored from this state. Zero once three outs
        have been recorded.
    """
    _check_base_state(base_state)
    if outs == OUTS_PER_HALF_INNING:
        return 0.0
    if outs not in OUTS:
        raise ValueError(f"outs must be in 0-3, got {outs}")

    return float(RUN_EXPECTANCY_MATRIX[outs, base_state])


def run_expectancy_frame() -> pd.DataFrame:
    """Run expectancy table as a DataFrame (rows = outs, columns = base states)."""
    df = pd.DataFrame(RUN_EXPECTANCY_MATRIX, index=OUTS, columns=BASE_STATE_NAMES)
    df.index.name = "outs"
    return df


def encode_base_state(on_1b: bool, on_2b: bool, on_3b: bool) -> int:
    """
    Encode base occupancy as a single integer 0-7.

    Uses binary representation: bit 0 = 1B, bit 1 = 2B, bit 2 = 3B
    """
    state = 0
    if on_1b:
        state |= 1  # bit 0
    if on_2b:
        state |= 2  # bit 1
    if on_3b:
        state |= 4  # bit 2
    return state


def runners_to_base_state(runners: Iterable[str]) -> int:
    """
    Convert runner positions to a base state.

    Parameters
    ----------
    runners : iterable of str
        Occupied bases by name: "first", "second", "third"

    Returns
    -------
    int
        Encoded base state (0-7)
    """
    state = 0
    for runner in runners:
        if runner not in BASE_BITS:
            raise ValueError(f"Unknown base {runner!r}; expected one of {BASE_NAMES}")
        state |= BASE_BITS[runner]
    return state


def base_state_to_runners(base_state: int) -> List[str]:
    """Occupied base names for an encoded base state, lead runner last."""
    _check_base_state(base_state)
    return [name for name in BASE_NAMES if base_state & BASE_BITS[name]]


def advance_runners(base_state: int, outcome: str) -> Tuple[int, int]:
    """
    Apply a plate appearance outcome to the runners on base.

    Rules are fixed and deliberately simple:

    - home run: every runner and the batter score, bases empty
    - triple: every runner scores, batter on third
    - double: runners on 2B and 3B score, runner on 1B stops at third,
      batter on second
    - single: runners on 2B and 3B score, runner on 1B to second,
      batter on first
    - walk / HBP: force advancement only; a run scores only with the
      bases loaded

    Parameters
    ----------
    base_state : int
        Encoded base state before the play (0-7)
    outcome : str
        One of the runner-advancing outcomes

    Returns
    -------
    tuple
        (new_base_state, runs_scored)
    """
    _check_base_state(base_state)

    on_1b = bool(base_state & 1)
    on_2b = bool(base_state & 2)
    on_3b = bool(base_state & 4)
    num_runners = on_1b + on_2b + on_3b

    if outcome == HOME_RUN:
        return 0, num_runners + 1

    if outcome == TRIPLE:
        return 4, num_runners

    if outcome == DOUBLE:
        runs = on_2b + on_3b
        new_base = 2  # Batter on second
        if on_1b:
            new_base |= 4  # Runner from 1B to 3B (conservative)
        return new_base, runs

    if outcome == SINGLE:
        runs = on_2b + on_3b
        new_base = 1  # Batter on first
        if on_1b:
            new_base |= 2
        return new_base, runs

    if outcome in (WALK, HIT_BY_PITCH):
        # Batter takes first; each runner moves up only if forced
        new_base = base_state | 1
        runs = 0
        if on_1b:
            new_base |= 2
            if on_2b:
                new_base |= 4
                if on_3b:
                    runs = 1
        return new_base, runs

    raise ValueError(f"Outcome {outcome!r} does not advance runners")
