"""Command line entry point for the volume matching engine."""

import logging
from pathlib import Path
from typing import List, Optional
import argparse
import sys

from .cli import MatchingDisplay
from .config import MatcherConfigManager
from .loaders import load_matching_input
from .matcher import ProportionalMatcher
from .models import MatchingResult
from .strategies import (
    CartesianStrategy,
    EnergyPriorityStrategy,
    RegionStrategy,
    SiteStrategy,
    SAME_REGION,
)
from .utils import create_leftovers_dataframe, create_matches_dataframe
from .validation import MatchingError

logger = logging.getLogger(__name__)

MATCHES_CSV = "matches.csv"
LEFTOVERS_CSV = "leftovers.csv"


def run_matching(
    input_path: Path,
    config_path: Optional[Path] = None,
    output_path: Optional[Path] = None,
    csv_dir: Optional[Path] = None,
    show_strategies: bool = False,
    show_leftovers: bool = True,
    display: Optional[MatchingDisplay] = None,
) -> MatchingResult:
    """Run the complete matching process on a JSON input file.

    Args:
        input_path: JSON file with consumptions and generations
        config_path: Optional config directory
        output_path: Optional path to write the result JSON to
        csv_dir: Optional directory to write matches and leftovers CSV files to
        show_strategies: Whether to display one table per strategy
        show_leftovers: Whether to display leftover entities
        display: Optional display. Creates default if None.

    Returns:
        MatchingResult of the run

    Raises:
        MatchingError: If the input cannot be loaded or validated
    """
    display = display or MatchingDisplay()
    display.show_header()

    logger.info("Loading matching input...")
    raw_input = load_matching_input(input_path)
    matcher = ProportionalMatcher(MatcherConfigManager(config_path))
    validated = matcher.validator.validate(raw_input.consumptions, raw_input.generations)
    display.show_loading_summary(validated.consumption_count, validated.generation_count)

    result, statistics = matcher.match_validated(validated)

    if show_strategies:
        display.show_strategy_tables(result, validated.consumptions, validated.generations)

    display.show_match_results(result, statistics)

    if show_leftovers:
        display.show_leftovers(result.leftover_consumptions, result.leftover_generations)

    if output_path is not None:
        output_path.write_text(result.to_json(indent=2), encoding="utf-8")
        logger.info(f"Wrote matching result to {output_path}")

    if csv_dir is not None:
        csv_dir.mkdir(parents=True, exist_ok=True)
        create_matches_dataframe(result).to_csv(csv_dir / MATCHES_CSV, index=False)
        create_leftovers_dataframe(result).to_csv(csv_dir / LEFTOVERS_CSV, index=False)
        logger.info(f"Wrote CSV output to {csv_dir}")

    return result


def list_strategies(display: Optional[MatchingDisplay] = None) -> None:
    """Display information about every kind of path strategy."""
    display = display or MatchingDisplay()
    display.show_header()

    for strategy in (
        SiteStrategy(),
        RegionStrategy(),
        EnergyPriorityStrategy(1, SAME_REGION),
        CartesianStrategy(),
    ):
        display.show_strategy_info(strategy.get_strategy_info())


def setup_logging(log_level: str = "NONE") -> None:
    """Set up logging configuration for volume matching.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, NONE)
    """
    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if log_level.upper() == "NONE":
        logging.getLogger().setLevel(logging.CRITICAL + 1)  # Higher than CRITICAL
        return

    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Proportional Volume Matching Engine")
    parser.add_argument(
        "input", type=Path, nargs="?", help="JSON file with consumptions and generations"
    )
    parser.add_argument("--output", type=Path, help="Write the result JSON to this file")
    parser.add_argument(
        "--csv-dir", type=Path, help="Write matches.csv and leftovers.csv to this directory"
    )
    parser.add_argument(
        "--config", type=Path, help="Directory containing matcher_config.json"
    )
    parser.add_argument(
        "--show-strategies",
        action="store_true",
        help="Display a table for every strategy of the run",
    )
    parser.add_argument(
        "--no-leftovers",
        action="store_true",
        help="Hide leftover consumptions and generations",
    )
    parser.add_argument(
        "--list-strategies",
        action="store_true",
        help="Display information about path strategies and exit",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "NONE"],
        default="NONE",
        help="Set logging level",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for volume matching."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    if args.list_strategies:
        list_strategies()
        return

    if args.input is None:
        parser.error("the input file is required")

    display = MatchingDisplay()

    try:
        result = run_matching(
            args.input,
            config_path=args.config,
            output_path=args.output,
            csv_dir=args.csv_dir,
            show_strategies=args.show_strategies,
            show_leftovers=not args.no_leftovers,
            display=display,
        )
        logger.info(f"Matching completed. Total matched pairs: {len(result.matches)}")

    except KeyboardInterrupt:
        logger.info("Matching process interrupted by user")
        sys.exit(1)
    except (MatchingError, FileNotFoundError) as e:
        logger.error(f"Matching failed: {e}")
        display.show_error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
