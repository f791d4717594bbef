"""Fetch team member stats and refresh the merged team dataset."""
import argparse
import logging
from typing import List, Optional

from teamstats.config import load_config, validate_config
from teamstats.errors import ConfigError, NoMembersFetched, WriteFailure
from teamstats.log import configure_logging
from teamstats.services.update import run_update

log = logging.getLogger("teamstats.update_data")


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch per-member racing stats and merge them into the team dataset.",
    )
    parser.add_argument(
        "--config",
        help="Path to a JSON config file (defaults to $TEAMSTATS_CONFIG).",
    )
    parser.add_argument(
        "--output",
        help="Output path for the merged dataset.",
    )
    parser.add_argument(
        "--api-base",
        help="Base URL of the member career stats API.",
    )
    parser.add_argument(
        "--delay",
        type=float,
        help="Seconds to wait between members.",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)

    level = None
    if args.log_level:
        level = logging._nameToLevel.get(args.log_level.upper(), logging.INFO)

    try:
        cfg = load_config(args.config)
        if args.output:
            cfg["output_path"] = args.output
        if args.api_base:
            cfg["api_base"] = args.api_base
        if args.delay is not None:
            cfg["request_delay_seconds"] = args.delay
        configure_logging(level, cfg)
        validate_config(cfg)
    except ConfigError as exc:
        configure_logging(level)
        log.critical("FATAL: %s", exc)
        return 2

    try:
        run_update(cfg)
    except NoMembersFetched:
        log.error("No data fetched successfully. Exiting.")
        return 1
    except WriteFailure as exc:
        log.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
