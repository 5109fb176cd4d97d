#!/usr/bin/env python3
"""
run_simulation.py

CLI entry point for bullpen decision simulations.

Usage:
    python Bullpen/run_simulation.py --help
    python Bullpen/run_simulation.py --list-pitchers
    python Bullpen/run_simulation.py --pitchers P001 P014 P028 --inning 8 --outs 1 \\
        --home-score 3 --away-score 2 --home-pitching --runners first
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from Bullpen.config import DEFAULT_ITERATIONS, OUTPUT_DIR, BASE_NAMES
from Bullpen.pitcher_model import expected_runs_per_inning, PitcherProfile
from Bullpen.run_expectancy import get_run_expectancy, run_expectancy_frame
from Bullpen.scenario import (
    load_pitchers,
    resolve_pitchers,
    validate_iterations,
    validate_pitcher_ids,
    validate_scenario,
    PitcherNotFoundError,
)
from Bullpen.simulation_engine import compare_options, results_to_frame
from Bullpen.utils import setup_logging
from Bullpen.win_probability import win_probability

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = (".csv", ".parquet")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare relief pitchers by simulated win probability",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List the reliever roster
  python Bullpen/run_simulation.py --list-pitchers

  # Home team protecting a one-run lead, bottom 8, one out, runner on first
  python Bullpen/run_simulation.py --pitchers P001 P014 P028 \\
      --inning 8 --outs 1 --home-score 3 --away-score 2 --home-pitching --runners first

  # Reproducible run on 4 worker processes, saved with plots
  python Bullpen/run_simulation.py --pitchers P002 P022 --iterations 10000 \\
      --seed 7 --workers 4 --output results.parquet --plot plots/
        """
    )

    parser.add_argument(
        "--list-pitchers",
        action="store_true",
        help="List the reliever roster and exit",
    )

    parser.add_argument(
        "--show-re-table",
        action="store_true",
        help="Print the run expectancy table and exit",
    )

    parser.add_argument(
        "--roster",
        type=str,
        help="Pitcher roster CSV (default: Data/relievers.csv)",
    )

    parser.add_argument(
        "--pitchers",
        nargs="+",
        help="Pitcher ids to compare (2-6)",
    )

    parser.add_argument("--inning", type=int, default=9, help="Inning (1-15, default: 9)")
    parser.add_argument("--outs", type=int, default=0, help="Outs (0-2, default: 0)")
    parser.add_argument("--home-score", type=int, default=0, help="Home team score")
    parser.add_argument("--away-score", type=int, default=0, help="Away team score")

    side = parser.add_mutually_exclusive_group()
    side.add_argument(
        "--home-pitching",
        dest="home_pitching",
        action="store_true",
        default=True,
        help="Home team is pitching, bottom of the inning (default)",
    )
    side.add_argument(
        "--away-pitching",
        dest="home_pitching",
        action="store_false",
        help="Away team is pitching, top of the inning",
    )

    parser.add_argument(
        "--runners",
        nargs="*",
        default=[],
        choices=BASE_NAMES,
        help="Occupied bases",
    )

    parser.add_argument(
        "--iterations",
        type=int,
        default=DEFAULT_ITERATIONS,
        help=f"Trials per pitcher (100-10000, default: {DEFAULT_ITERATIONS})",
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible results",
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of parallel workers (default: 1)",
    )

    parser.add_argument(
        "--output",
        type=str,
        help="Save results table as .csv or .parquet (bare names go to Bullpen/output/)",
    )

    parser.add_argument(
        "--plot",
        type=str,
        help="Directory to save result plots",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable DEBUG level logging",
    )

    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress progress output",
    )

    return parser


def print_roster(roster) -> None:
    print(f"\nRelievers ({len(roster)}):")
    for _, row in roster.iterrows():
        pitcher = PitcherProfile.from_record(row)
        print(
            f"  {pitcher.pitcher_id:6s} {pitcher.name:22s} {pitcher.team or '':4s} {pitcher.throws}  "
            f"ERA {pitcher.era:.2f}  FIP {pitcher.fip:.2f}  K/9 {pitcher.k9:4.1f}  "
            f"BB/9 {pitcher.bb9:.1f}  HR/9 {pitcher.hr9:.1f}  "
            f"xR/IP {expected_runs_per_inning(pitcher):.3f}"
        )


def resolve_output_path(output: str) -> Path:
    """Where results are written; raises ValueError for unsupported formats."""
    output_path = Path(output)
    if output_path.suffix not in OUTPUT_FORMATS:
        raise ValueError(
            f"Unsupported output format '{output_path.suffix}' for {output}; "
            f"use one of {', '.join(OUTPUT_FORMATS)}"
        )
    # Bare file names go to the package output directory
    if output_path.parent == Path("."):
        output_path = OUTPUT_DIR / output_path
    return output_path


def save_results(results_df, output: str) -> Path:
    output_path = resolve_output_path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.suffix == ".csv":
        results_df.to_csv(output_path, index=False)
    else:
        results_df.to_parquet(output_path, index=False)
    return output_path


def save_plots(results_df, plot_dir: str) -> None:
    import matplotlib
    matplotlib.use("Agg")  # Non-interactive backend for saving files
    import matplotlib.pyplot as plt

    from Bullpen.plotting import plot_run_distribution, plot_wp_comparison

    out_dir = Path(plot_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    fig = plot_run_distribution(results_df, save_path=str(out_dir / "run_distribution.png"))
    plt.close(fig)
    fig = plot_wp_comparison(results_df, save_path=str(out_dir / "wp_comparison.png"))
    plt.close(fig)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level=logging.DEBUG if args.debug else logging.WARNING)
    verbose = not args.quiet

    try:
        if args.show_re_table:
            print("\nRun expectancy (runs to end of half-inning):")
            print(run_expectancy_frame().to_string(float_format=lambda v: f"{v:.3f}"))
            return 0

        roster = load_pitchers(args.roster)

        if args.list_pitchers:
            print_roster(roster)
            return 0

        if not args.pitchers:
            parser.print_help()
            return 0

        pitcher_ids = validate_pitcher_ids(args.pitchers)
        iterations = validate_iterations(args.iterations)
        situation = validate_scenario(
            inning=args.inning,
            outs=args.outs,
            home_score=args.home_score,
            away_score=args.away_score,
            home_pitching=args.home_pitching,
            runners=args.runners,
        )
        pitchers = resolve_pitchers(pitcher_ids, roster)
        if args.output:
            resolve_output_path(args.output)

    except (ValueError, PitcherNotFoundError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if verbose:
        half = "Top" if situation.is_top_half else "Bot"
        bases = ", ".join(situation.runners) if situation.runners else "bases empty"
        print(
            f"Situation: {half} {situation.inning}, {situation.outs} out, {bases}, "
            f"home {situation.home_score} - away {situation.away_score}"
        )
        print(
            f"  Run expectancy: {get_run_expectancy(situation.outs, situation.base_state):.3f}  "
            f"Current WP (pitching team): {win_probability(situation):.3f}"
        )
        print(f"Simulating {len(pitchers)} pitchers x {iterations:,} trials with {args.workers} worker(s)...")

    results = compare_options(
        situation,
        pitchers,
        iterations=iterations,
        seed=args.seed,
        n_workers=args.workers,
    )
    results_df = results_to_frame(results)

    print(f"\n{'=' * 72}")
    print(f"{'#':>2}  {'Pitcher':22s} {'Runs':>6s} {'WP':>7s} {'dWP':>7s}   0R    1R    2R    3R+")
    for _, row in results_df.iterrows():
        marker = "*" if row["optimal"] else " "
        print(
            f"{row['rank']:>2}{marker} {row['pitcher_name']:22s} {row['avg_runs_allowed']:6.3f} "
            f"{row['avg_win_probability']:7.3f} {row['wp_delta']:+7.3f}  "
            f"{row['runs0']:.2f}  {row['runs1']:.2f}  {row['runs2']:.2f}  {row['runs3plus']:.2f}"
        )
    print(f"\nRecommended: {results[0].pitcher_name}")

    capped = int(results_df["capped_trials"].sum())
    if capped:
        logger.warning("%d trials stopped at the plate appearance cap", capped)

    if args.output:
        output_path = save_results(results_df, args.output)
        if verbose:
            print(f"Saved results to {output_path}")

    if args.plot:
        save_plots(results_df, args.plot)
        if verbose:
            print(f"Saved plots to {args.plot}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
