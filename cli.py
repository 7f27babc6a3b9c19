"""Command-line interface for PubChem compound extraction."""

import argparse
import sys
from typing import List, Optional

from batch_processor import BatchProcessor
from config import LOG_LEVEL, MAX_WORKERS, RELATED_DELAY_MAX, RELATED_DELAY_MIN
from logger import LogManager
from related_resolver import DelayPolicy


def positive_int(value: str) -> int:
    """Argparse type for positive integers."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value}")
    return number


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        args: Optional list of command line arguments

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Extract compound attributes and related records from PubChem"
    )

    parser.add_argument(
        'cids',
        type=positive_int,
        nargs='+',
        help='PubChem compound identifiers'
    )

    parser.add_argument(
        '--min-delay',
        type=float,
        default=RELATED_DELAY_MIN,
        help='Minimum seconds between related-record requests'
    )

    parser.add_argument(
        '--max-delay',
        type=float,
        default=RELATED_DELAY_MAX,
        help='Maximum seconds between related-record requests'
    )

    parser.add_argument(
        '-w', '--workers',
        type=positive_int,
        default=MAX_WORKERS,
        help='Compounds extracted in parallel'
    )

    parser.add_argument(
        '--indent',
        type=int,
        default=None,
        help='Indent JSON output by this many spaces'
    )

    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=LOG_LEVEL,
        help='Logging level'
    )

    parsed = parser.parse_args(args)
    if parsed.min_delay < 0 or parsed.min_delay > parsed.max_delay:
        parser.error("--min-delay must be between 0 and --max-delay")
    return parsed


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Args:
        args: Optional list of command line arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parsed_args = parse_args(args)

    log_manager = LogManager()
    log_manager.set_level(parsed_args.log_level)
    logger = log_manager.get_logger()

    try:
        processor = BatchProcessor(
            max_workers=parsed_args.workers,
            delay_policy_factory=lambda: DelayPolicy(
                parsed_args.min_delay, parsed_args.max_delay
            ),
            show_progress=len(parsed_args.cids) > 1
        )
        batch = processor.extract_many(parsed_args.cids)
    except Exception as e:
        logger.exception(f"Error: {str(e)}")
        return 1

    for cid in dict.fromkeys(parsed_args.cids):
        if cid in batch.results:
            print(batch.results[cid].to_json(indent=parsed_args.indent))

    return 0 if batch.ok else 1


if __name__ == "__main__":
    sys.exit(main())
