"""
Algorithm registry.

Maps every Algorithm to its sequencer and runs it timed, over a private
copy of the jobs.
"""

import logging
from typing import Iterable, List, Optional

from .algorithm import (
    DEFAULT_PERMUTATION_LIMIT,
    permutation_search,
    run_greedy,
    sort_by_delivery,
    sort_by_release,
    sort_by_release_plus_processing,
)
from .simulation import run_event_simulation, run_preemptive
from .timing import Stopwatch
from .types import Algorithm, JobRecord, SequencingResult


logger = logging.getLogger(__name__)


SEQUENCERS = {
    Algorithm.SORT_RELEASE: sort_by_release,
    Algorithm.SORT_DELIVERY: sort_by_delivery,
    Algorithm.SORT_RELEASE_PROCESSING: sort_by_release_plus_processing,
    Algorithm.SCHRAGE: run_greedy,
    Algorithm.SCHRAGE_EVENT: run_event_simulation,
    Algorithm.SCHRAGE_PREEMPTIVE: run_preemptive,
}


def run_algorithm(
    algorithm: Algorithm,
    jobs: List[JobRecord],
    permutation_limit: int = DEFAULT_PERMUTATION_LIMIT
) -> SequencingResult:
    """
    Run one algorithm over a copy of the jobs and time it.

    Args:
        algorithm: Algorithm to run
        jobs: Jobs to sequence
        permutation_limit: Largest instance the permutation search accepts

    Returns:
        The schedule, its value and the elapsed time

    Raises:
        ValueError: If the permutation search is asked for too many jobs
    """
    private_jobs = list(jobs)
    with Stopwatch(algorithm.value) as watch:
        if algorithm is Algorithm.PERMUTATION:
            schedule, value = permutation_search(private_jobs, permutation_limit)
        else:
            schedule, value = SEQUENCERS[algorithm](private_jobs)

    logger.info(f"{algorithm.value}: value {value} in {watch.elapsed_ms:.3f} ms")
    return SequencingResult(
        algorithm=algorithm,
        schedule=schedule,
        value=value,
        elapsed_ms=watch.elapsed_ms
    )


def default_algorithms(job_count: int, permutation_limit: int) -> List[Algorithm]:
    """Every algorithm, skipping the permutation search above its limit."""
    return [
        algorithm for algorithm in Algorithm
        if algorithm is not Algorithm.PERMUTATION or job_count <= permutation_limit
    ]


def compare_algorithms(
    jobs: List[JobRecord],
    algorithms: Optional[Iterable[Algorithm]] = None,
    permutation_limit: int = DEFAULT_PERMUTATION_LIMIT
) -> List[SequencingResult]:
    """
    Run several algorithms independently over the same jobs.

    Args:
        jobs: Jobs to sequence
        algorithms: Algorithms to run, defaults to every applicable one
        permutation_limit: Largest instance the permutation search accepts

    Returns:
        One result per algorithm, in the order requested
    """
    if algorithms is None:
        algorithms = default_algorithms(len(jobs), permutation_limit)
    return [run_algorithm(a, jobs, permutation_limit) for a in algorithms]
