"""
Command line entry point.

Loads an instance file, runs the selected algorithms and prints each
job order with its criterion value and run time.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .algorithm import DEFAULT_PERMUTATION_LIMIT
from .loader import InstanceFormatError, load_instance
from .runner import compare_algorithms, default_algorithms
from .types import Algorithm, SequencingResult


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='rpq-sequencer',
        description='Sequence jobs with release, processing and delivery times on one machine.'
    )
    parser.add_argument('instance', help='Instance file: job count, then "r p q" per line')
    parser.add_argument(
        '--algorithm', '-a',
        action='append',
        choices=[a.value for a in Algorithm],
        help='Algorithm to run (repeatable); default runs all of them'
    )
    parser.add_argument(
        '--permutation-limit',
        type=int,
        default=DEFAULT_PERMUTATION_LIMIT,
        help='Largest instance the permutation search accepts (default: %(default)s)'
    )
    parser.add_argument(
        '--log-level',
        default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: %(default)s)'
    )
    return parser


def format_result(result: SequencingResult) -> str:
    order = ' '.join(str(job_id) for job_id in result.schedule.job_order())
    lines = [
        f"--- {result.algorithm.value} ---",
        f"Order: {order}",
        f"Value: {result.value}",
    ]
    preemptions = result.schedule.preemption_count()
    if preemptions:
        lines.append(f"Preemptions: {preemptions}")
    lines.append(f"Time: {result.elapsed_ms:.3f} ms")
    return '\n'.join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='[%(asctime)s] %(levelname)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        force=True
    )

    try:
        jobs = load_instance(args.instance)
    except InstanceFormatError as e:
        logger.error(str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.algorithm:
        algorithms = [Algorithm(name) for name in args.algorithm]
    else:
        algorithms = default_algorithms(len(jobs), args.permutation_limit)

    try:
        results = compare_algorithms(jobs, algorithms, args.permutation_limit)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    for result in results:
        print(format_result(result))
        print()
    return 0


if __name__ == '__main__':
    sys.exit(main())
