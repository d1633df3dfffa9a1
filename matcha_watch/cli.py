import argparse
import sys

from loguru import logger

from matcha_watch.config import Settings, get_settings
from matcha_watch.db.database import create_db_engine, init_db
from matcha_watch.errors import ConfigurationError, MatchaWatchError
from matcha_watch.scheduler.jobs import CheckerJob
from matcha_watch.scheduler.policy import build_policy
from matcha_watch.scheduler.runner import JobScheduler

EXIT_ITERATION_ERROR = 1
EXIT_CONFIG_ERROR = 2


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def init_database(settings: Settings):
    """Create the notified-product table."""
    engine = create_db_engine(settings.database_url)
    init_db(engine)
    logger.info(f"Database initialized at {settings.database_url}")


def run_check(settings: Settings) -> int:
    """Run one iteration and exit."""
    job = CheckerJob(settings)
    try:
        count = job.run_iteration()
    finally:
        job.close()
    logger.info(f"Check finished, {count} products announced")
    return count


def run_loop(settings: Settings):
    """Check on a fixed interval until the failure policy stops the job."""
    job = CheckerJob(settings)
    runner = JobScheduler(
        job,
        settings.job_interval_minutes,
        policy=build_policy(settings),
    )
    try:
        runner.start()
    finally:
        job.close()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Matcha product checker")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # run command
    subparsers.add_parser("run", help="Check the listing page on a fixed interval")

    # check command
    subparsers.add_parser("check", help="Run a single check iteration")

    # init-db command
    subparsers.add_parser("init-db", help="Create the notified-product table")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error(f"Error getting parameters: {e}")
        return EXIT_CONFIG_ERROR

    configure_logging(settings.log_level)

    try:
        if args.command == "init-db":
            init_database(settings)
        elif args.command == "check":
            run_check(settings)
        elif args.command == "run":
            run_loop(settings)
    except MatchaWatchError as e:
        logger.error(f"Job stopped: {e}")
        return EXIT_ITERATION_ERROR
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except Exception as e:
        logger.error(f"Job stopped on unexpected error: {e!r}")
        return EXIT_ITERATION_ERROR
    return 0


if __name__ == "__main__":
    sys.exit(main())
