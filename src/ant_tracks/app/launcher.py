#!/usr/bin/env python3
"""
Command-line entry point for Ant Tracks.

Opens a trajectory database, refreshes and links its trajectories, and logs
a summary of what was loaded.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from ..config import LOG_LEVELS, TrackerConfig, load_config
from ..core.datastore import TrajectoryDataStore
from ..data.records import TrajectoryStoreError


def setup_logging(log_level: int = logging.INFO) -> None:
    """Set up console logging for the application."""
    handlers = [logging.StreamHandler(sys.stdout)]

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger(__name__)
    logger.info("Ant Tracks starting up...")
    logger.info(f"Python version: {sys.version}")
    logger.info(f"Working directory: {os.getcwd()}")


def parse_arguments(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Ant Tracks - load and link ant trajectories from a database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ant-tracks --db tracks.sqlite             # Load and summarize a database
  ant-tracks --config tracks.json           # Use settings from a config file
  ant-tracks --db tracks.sqlite --no-link   # Skip interaction linking
        """,
    )

    parser.add_argument("--db", type=str, help="Path to the SQLite trajectory database")

    parser.add_argument("--config", type=str, help="Path to a JSON config file")

    parser.add_argument(
        "--log-level",
        choices=list(LOG_LEVELS),
        default=None,
        help="Set the logging level (default: INFO, or the config file's level)",
    )

    parser.add_argument(
        "--no-link", action="store_true", help="Do not link interaction points"
    )

    parser.add_argument("--version", action="version", version="Ant Tracks 1.0.0")

    args = parser.parse_args(argv)
    if not args.db and not args.config:
        parser.error("one of --db or --config is required")
    return args


def resolve_config(args: argparse.Namespace) -> TrackerConfig:
    """Merge the config file (if any) with command line overrides."""
    if args.config:
        config = load_config(args.config)
    else:
        config = TrackerConfig(database_path=Path(args.db))
    if args.db:
        config.database_path = Path(args.db)
    if args.log_level:
        config.log_level = args.log_level
    if args.no_link:
        config.link_interactions = False
    return config


def main(argv=None) -> int:
    """
    Application entry point.

    Returns 0 on success and 1 if the configuration or the database could
    not be read.
    """
    args = parse_arguments(argv)
    try:
        config = resolve_config(args)
    except (OSError, ValueError) as e:
        setup_logging()
        logging.getLogger(__name__).error(f"Could not load configuration: {e}")
        return 1

    setup_logging(getattr(logging, config.log_level.upper()))
    logger = logging.getLogger(__name__)

    try:
        store = TrajectoryDataStore.open(
            config.database_path, link=config.link_interactions
        )
    except TrajectoryStoreError as e:
        logger.error(f"Could not load trajectories: {e}", exc_info=True)
        return 1

    with store:
        for trajectory in store.trajectories:
            interactions = sum(1 for point in trajectory if point.is_interaction)
            logger.info(
                f"Trajectory {trajectory.id}: frames {trajectory.first_frame}-"
                f"{trajectory.last_frame}, {len(trajectory)} points, "
                f"{trajectory.path_length():.1f} px travelled, "
                f"{interactions} interactions, {trajectory.move_type.value}"
            )
        logger.info(
            f"Loaded {len(store.trajectories)} trajectories with "
            f"{len(store.links)} linked interactions from {config.database_path}"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
