"""Main CLI interface for the survivor pool analysis pipeline."""

import argparse
import logging
import sys
from pathlib import Path

from .data.loader import create_sample_data
from .data.validators import MalformedInputError
from .pipeline.materialization import MaterializationConfig, SurvivorFeatureMaterializer


def run_pipeline(args):
    """Build enriched pick and survival tables from the four input snapshots."""
    config = MaterializationConfig(
        elo_path=args.elo,
        picks_path=args.picks,
        games_path=args.games,
        lookup_path=args.lookup,
        output_dir=args.output_dir,
        cache_dir=args.cache_dir,
        min_season=args.min_season,
        week_start=args.week_start,
        week_rounding=args.week_rounding,
        pick_pct_scale=args.pick_pct_scale,
        lookup_scheme=args.lookup_scheme,
    )
    print(f"Building survivor features for seasons >= {config.min_season}...")
    try:
        manifest = SurvivorFeatureMaterializer(config).run()
    except MalformedInputError as e:
        print(f"Error: malformed input ({e})")
        return 1

    counts = manifest["row_counts"]
    print(f"Enriched {counts['enriched_picks']} pick rows; {counts['survival']} survival rows.")
    for entry in manifest["team_resolution"]:
        if entry["unresolved_rows"]:
            print(f"   - {entry['table']}.{entry['column']}: "
                  f"{entry['unresolved_rows']} unresolved rows")
    print(f"✓ Done! Manifest: {manifest['manifest_path']}")
    return 0


def create_sample(args):
    """Create sample input files."""
    print(f"Creating sample data in {args.output_dir}...")
    paths = create_sample_data(args.output_dir)
    print("✓ Sample data created!")
    print("\nYou can now run the pipeline with:")
    out = Path(args.output_dir)
    print(
        "  python -m survivor_eda.main run"
        f" --elo {paths['elo']} --picks {paths['picks']}"
        f" --games {paths['games']} --lookup {paths['team_lookup']}"
        f" --output-dir {out / 'processed'} --min-season 2019"
    )
    return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Survivor pool EDA - team reconciliation, rank features and survival statistics"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log pipeline progress")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    run_parser = subparsers.add_parser("run", help="Build enriched pick and survival tables")
    run_parser.add_argument("--elo", default="data/raw/nfl_elo.csv", help="Win-probability table (path or URL)")
    run_parser.add_argument("--picks", default="data/raw/pick_distribution.csv", help="Pick-distribution table")
    run_parser.add_argument("--games", default="data/raw/nfl_games.csv", help="Game-results table")
    run_parser.add_argument("--lookup", default="data/raw/team_lookup.csv", help="Team lookup table")
    run_parser.add_argument("--output-dir", default="data/processed", help="Destination for derived tables")
    run_parser.add_argument("--cache-dir", default="data/raw/cache", help="Cache directory for downloaded inputs")
    run_parser.add_argument("--min-season", type=int, default=2010, help="Earliest season kept (default: 2010)")
    run_parser.add_argument(
        "--week-start",
        type=int,
        default=6,
        help="Weekday that starts a week, Monday=0 ... Sunday=6 (default: 6)",
    )
    run_parser.add_argument(
        "--week-rounding",
        choices=["nearest", "floor"],
        default="nearest",
        help="Snap dates to the nearest week start or the previous one",
    )
    run_parser.add_argument(
        "--pick-pct-scale",
        choices=["fraction", "percent"],
        default="fraction",
        help="Whether pick_pct is stored as 0-1 fractions or 0-100 percentages",
    )
    run_parser.add_argument(
        "--lookup-scheme",
        choices=["team_short", "team_full"],
        default=None,
        help="Match team names against one lookup column only",
    )

    sample_parser = subparsers.add_parser("sample", help="Create sample input files")
    sample_parser.add_argument(
        "--output-dir", "-o",
        default="sample_data",
        help="Directory for the sample CSV files",
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.command == "run":
        return run_pipeline(args)
    elif args.command == "sample":
        return create_sample(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
