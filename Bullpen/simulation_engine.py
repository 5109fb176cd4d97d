"""
simulation_engine.py

Monte Carlo comparison of candidate relief pitchers.

Each candidate pitches the rest of the same half-inning many times; every
trial's runs allowed is turned into one win probability sample and the
candidates are ranked by mean win probability.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .config import DEFAULT_ITERATIONS, RUN_BUCKETS, RUN_BUCKET_LABELS
from .half_inning import SimulationDiagnostics, simulate_half_inning
from .pitcher_model import PitcherProfile
from .win_probability import GameSituation, win_probability, project_after_half_inning

logger = logging.getLogger(__name__)

SeedLike = Union[None, int, np.random.SeedSequence]


@dataclass
class SimulationResult:
    """Aggregate of all trials for one candidate pitcher."""

    pitcher_id: str
    pitcher_name: str
    avg_runs_allowed: float
    avg_win_probability: float
    wp_delta: float
    baseline_win_probability: float
    iterations: int
    distribution: Dict[str, float] = field(default_factory=dict)
    optimal: bool = False
    capped_trials: int = 0

    def to_dict(self) -> Dict:
        return asdict(self)


def run_distribution(runs: np.ndarray) -> Dict[str, float]:
    """Fraction of trials allowing exactly 0, 1, 2 and 3+ runs."""
    counts = np.bincount(np.minimum(runs, RUN_BUCKETS - 1), minlength=RUN_BUCKETS)
    fractions = counts / len(runs)
    return {label: float(frac) for label, frac in zip(RUN_BUCKET_LABELS, fractions)}


def simulate_pitcher(
    situation: GameSituation,
    pitcher: PitcherProfile,
    iterations: int = DEFAULT_ITERATIONS,
    rng: Optional[np.random.Generator] = None,
    baseline_wp: Optional[float] = None,
) -> SimulationResult:
    """
    Run Monte Carlo trials for a single pitcher.

    Parameters
    ----------
    situation : GameSituation
        Situation when the pitcher enters; identical for every trial
    pitcher : PitcherProfile
        Candidate pitcher
    iterations : int
        Number of independent half-inning trials
    rng : np.random.Generator, optional
        Random source. Unseeded if omitted.
    baseline_wp : float, optional
        Win probability before any trial. Computed from ``situation`` if
        omitted; pass it in when comparing candidates so deltas share it.

    Returns
    -------
    SimulationResult
        Mean runs allowed, mean win probability, delta vs. baseline and the
        runs-allowed distribution. ``optimal`` is left False.
    """
    if iterations <= 0:
        raise ValueError(f"iterations must be positive, got {iterations}")

    if rng is None:
        rng = np.random.default_rng()
    if baseline_wp is None:
        baseline_wp = win_probability(situation)

    diagnostics = SimulationDiagnostics()
    runs_samples = np.empty(iterations, dtype=np.int64)
    wp_samples = np.empty(iterations, dtype=np.float64)

    # Win probability depends only on runs allowed within one comparison
    wp_by_runs: Dict[int, float] = {}

    for i in range(iterations):
        result = simulate_half_inning(
            situation.outs,
            situation.base_state,
            pitcher,
            rng,
            diagnostics=diagnostics,
        )
        runs_samples[i] = result.runs

        if result.runs not in wp_by_runs:
            wp_by_runs[result.runs] = project_after_half_inning(situation, result.runs)
        wp_samples[i] = wp_by_runs[result.runs]

    logger.debug("%s: %s", pitcher.name, diagnostics.as_dict())
    if diagnostics.capped_trials:
        logger.info(
            "%s: %d of %d trials hit the plate appearance cap",
            pitcher.name, diagnostics.capped_trials, iterations,
        )

    avg_win_probability = float(wp_samples.mean())

    return SimulationResult(
        pitcher_id=pitcher.pitcher_id,
        pitcher_name=pitcher.name,
        avg_runs_allowed=float(runs_samples.mean()),
        avg_win_probability=avg_win_probability,
        wp_delta=avg_win_probability - baseline_wp,
        baseline_win_probability=baseline_wp,
        iterations=iterations,
        distribution=run_distribution(runs_samples),
        capped_trials=diagnostics.capped_trials,
    )


def _simulate_pitcher_worker(args) -> SimulationResult:
    """
    Worker function for parallel simulation.

    Parameters
    ----------
    args : tuple
        (situation, pitcher, iterations, seed_seq, baseline_wp)
    """
    situation, pitcher, iterations, seed_seq, baseline_wp = args
    return simulate_pitcher(
        situation,
        pitcher,
        iterations=iterations,
        rng=np.random.default_rng(seed_seq),
        baseline_wp=baseline_wp,
    )


def rank_results(results: List[SimulationResult]) -> List[SimulationResult]:
    """
    Sort by mean win probability, best first, and flag the top entry.

    The sort is stable: candidates with equal mean win probability keep
    their input order.
    """
    ranked = sorted(results, key=lambda r: r.avg_win_probability, reverse=True)
    for idx, result in enumerate(ranked):
        result.optimal = idx == 0
    return ranked


def compare_options(
    situation: GameSituation,
    pitchers: Sequence[PitcherProfile],
    iterations: int = DEFAULT_ITERATIONS,
    seed: SeedLike = None,
    n_workers: int = 1,
) -> List[SimulationResult]:
    """
    Compare candidate pitchers for the same situation.

    Parameters
    ----------
    situation : GameSituation
        Situation at the pitching change
    pitchers : sequence of PitcherProfile
        Candidates, in the caller's order
    iterations : int
        Trials per candidate
    seed : int or np.random.SeedSequence, optional
        Root seed. Each candidate draws from its own child stream, so a
        fixed seed gives the same results sequentially or in parallel.
    n_workers : int
        Number of worker processes. If > 1, candidates run in parallel.

    Returns
    -------
    list of SimulationResult
        Sorted by mean win probability (descending); the first entry is
        flagged optimal.
    """
    if not pitchers:
        raise ValueError("No pitchers to compare")

    # Shared baseline so deltas are comparable across candidates
    baseline_wp = win_probability(situation)

    root = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
    child_seeds = root.spawn(len(pitchers))

    logger.info(
        "Comparing %d pitchers over %d trials each (baseline WP %.3f)",
        len(pitchers), iterations, baseline_wp,
    )

    worker_args = [
        (situation, pitcher, iterations, child_seed, baseline_wp)
        for pitcher, child_seed in zip(pitchers, child_seeds)
    ]

    if n_workers > 1:
        with ProcessPoolExecutor(max_workers=n_workers) as executor:
            # map() keeps input order, which the tie-break relies on
            results = list(executor.map(_simulate_pitcher_worker, worker_args))
    else:
        results = [_simulate_pitcher_worker(args) for args in worker_args]

    for result in results:
        logger.debug(
            "%s: avg runs %.3f, avg WP %.4f",
            result.pitcher_name, result.avg_runs_allowed, result.avg_win_probability,
        )

    return rank_results(results)


def results_to_frame(results: Sequence[SimulationResult]) -> pd.DataFrame:
    """
    Flatten ranked results into a DataFrame, one row per pitcher.

    Columns: rank, pitcher_id, pitcher_name, avg_runs_allowed,
    avg_win_probability, wp_delta, baseline_win_probability, optimal,
    iterations, capped_trials and one column per runs bucket.
    """
    rows = []
    for rank, result in enumerate(results, start=1):
        row = {
            "rank": rank,
            "pitcher_id": result.pitcher_id,
            "pitcher_name": result.pitcher_name,
            "avg_runs_allowed": result.avg_runs_allowed,
            "avg_win_probability": result.avg_win_probability,
            "wp_delta": result.wp_delta,
            "baseline_win_probability": result.baseline_win_probability,
            "optimal": result.optimal,
            "iterations": result.iterations,
            "capped_trials": result.capped_trials,
        }
        for label in RUN_BUCKET_LABELS:
            row[label] = result.distribution.get(label, 0.0)
        rows.append(row)

    return pd.DataFrame(rows)
