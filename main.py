"""last-report — show a listing of last logged in users from a wtmp file."""

import logging
import sys
from argparse import ArgumentParser

import yaml

from last_report.config import DEFAULT_WTMP_FILE, load_config, load_yaml_config
from last_report.filters import build_user_filter
from last_report.formatter import TIME_FORMATS, LineFormatter
from last_report.reconstructor import SessionReconstructor
from last_report.wtmp import RecordDecodeError, read_records

logger = logging.getLogger(__name__)


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="last-report",
        description="Show a listing of last logged in users.",
        epilog="For more details see last(1).",
    )
    parser.add_argument(
        "users",
        nargs="*",
        help="Only show entries whose user or line matches one of these names",
    )
    parser.add_argument(
        "-f", "--file",
        help=f"Use a specific file instead of {DEFAULT_WTMP_FILE}",
    )
    parser.add_argument(
        "-x", "--system",
        action="store_true",
        help="Display system shutdown entries and run level changes",
    )
    parser.add_argument(
        "--time-format",
        choices=sorted(TIME_FORMATS),
        help="Timestamp format (default: short)",
    )
    parser.add_argument(
        "--utc",
        action="store_true",
        help="Show timestamps in UTC instead of local time",
    )
    parser.add_argument(
        "--config",
        help="Path to YAML config file",
    )
    return parser


def run_report(args) -> int:
    """Load records, replay them, and print the report. Returns an exit code."""
    try:
        config = load_config(args, load_yaml_config(args.config))
    except (OSError, yaml.YAMLError) as e:
        logger.error("invalid config %s: %s", args.config, e)
        return 1

    try:
        logging.getLogger().setLevel(config.log_level)
        formatter = LineFormatter(time_format=config.time_format, utc=config.utc)
    except ValueError as e:
        logger.error("%s", e)
        return 1
    logger.debug("Config: %s", config)

    try:
        records = read_records(config.wtmp_file)
    except OSError as e:
        logger.error("cannot open %s: %s", config.wtmp_file, e.strerror or e)
        return 1
    except RecordDecodeError as e:
        logger.error("%s", e)
        return 1

    reconstructor = SessionReconstructor(
        formatter=formatter,
        show_system_events=config.show_system_events,
        user_filter=build_user_filter(config.users),
    )
    for line in reconstructor.run(records):
        print(line)
    return 0


def main():
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [last-report] %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    parser = build_parser()
    args = parser.parse_args()
    sys.exit(run_report(args))


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)
