# offer_model/cli.py
# Command-line interface entry point (argparse)
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from offer_model.config.loaders import ConfigLoadError, load_engine_config
from offer_model.config.models import DEFAULT_CONFIG
from offer_model.data.readers import DataReadError, read_deal_table, read_parameter_table, read_profile
from offer_model.engines.calculator import calculate_offers
from offer_model.logging_config import DEBUG_LOGGER, ERROR_LOGGER, setup_logging
from offer_model.reporting.metrics import format_millions, summarize, totals_frame
from offer_model.reporting.outputs import save_results
from offer_model.state.history import JsonFileBestDealHistory

# Get logger for this module
logger = logging.getLogger(__name__)

# Directory for log files
LOG_DIR = Path("output/offer_logs")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Project recruiting offers for an advisor across candidate firms."
    )

    # Required arguments
    parser.add_argument(
        "--profile",
        type=str,
        required=True,
        help="Path to the advisor profile (YAML or JSON)."
    )

    # Optional arguments
    parser.add_argument(
        "--deals",
        type=str,
        default=None,
        help="Path to the firm deal table (.csv, .json, .yaml)."
    )
    parser.add_argument(
        "--parameters",
        type=str,
        default=None,
        help="Path to the firm parameter table (.csv, .json, .yaml)."
    )
    parser.add_argument(
        "--firms",
        nargs="+",
        default=[],
        help="Firms to compare, e.g. --firms 'Morgan Stanley' UBS rbc"
    )
    parser.add_argument(
        "--premium",
        action="store_true",
        help="Apply premium business-mix adjustments"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to the YAML engine configuration file."
    )
    parser.add_argument(
        "--history",
        type=str,
        default=None,
        help="JSON file holding the previously reported best deal; updated after the run."
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory to save comparison.csv, totals.csv and offer_result.json."
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=str(LOG_DIR),
        help=f"Directory to store log files (default: {LOG_DIR})"
    )

    return parser.parse_args(argv)


def initialize_logging(debug: bool = False, log_dir: Path = LOG_DIR) -> None:
    """Initialize the logging configuration."""
    setup_logging(log_dir=log_dir, debug=debug)

    logger.info("Starting offer projection")
    logger.info(f"Command line arguments: {sys.argv}")
    logger.info(f"Pandas version: {pd.__version__}")
    logger.info(f"NumPy version: {np.__version__}")

    if debug:
        logging.getLogger(DEBUG_LOGGER).debug("Debug logging enabled")


def print_summary(result) -> None:
    summary = summarize(result)
    print(f"Best total deal:      {format_millions(summary['best_deal'])}"
          f" ({summary['best_firm'] or 'fallback estimate'})")
    print(f"Change vs previous:   {summary['change_pct']:+d}%")
    print(f"10-year move vs stay: {format_millions(summary['stay_vs_move_delta'])}")

    totals = totals_frame(result)
    ranked = totals[totals["selected"]].sort_values("rank")
    if not ranked.empty:
        print("\nSelected firms:")
        for row in ranked.itertuples(index=False):
            print(f"  {int(row.rank):>2}. {row.display_name:<16} "
                  f"total {format_millions(row.total):>10}  "
                  f"upfront {format_millions(row.guaranteed_upfront):>10}")


def run(args: argparse.Namespace) -> None:
    """Load inputs, compute offers and report.

    Raises:
        DataReadError: If an input table or the profile cannot be read
        ConfigLoadError: If the configuration file is missing or invalid
    """
    config = load_engine_config(args.config) if args.config else DEFAULT_CONFIG
    profile = read_profile(args.profile)
    parameters = read_parameter_table(args.parameters) if args.parameters else []
    deals = read_deal_table(args.deals) if args.deals else []
    history = JsonFileBestDealHistory(args.history) if args.history else None

    logger.info(
        f"Computing offers for {len(args.firms)} firm selection(s) "
        f"with {len(parameters)} parameter rows and {len(deals)} deal rows"
    )
    result = calculate_offers(
        profile,
        firm_parameters=parameters,
        firm_deals=deals,
        selected_firms=args.firms,
        has_premium=args.premium,
        history=history,
        config=config,
    )

    print_summary(result)

    if args.output_dir:
        paths = save_results(result, Path(args.output_dir))
        print(f"\nOutputs saved in: {Path(args.output_dir)}")
        for kind, path in paths.items():
            logger.debug(f"{kind}: {path}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the offer projection CLI."""
    err_logger = logging.getLogger(ERROR_LOGGER)

    args = parse_arguments(argv)
    initialize_logging(debug=args.debug, log_dir=Path(args.log_dir))

    try:
        run(args)
        return 0
    except (DataReadError, ConfigLoadError) as e:
        err_logger.error(f"Invalid input: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
