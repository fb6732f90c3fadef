"""
Core sequencing algorithm.

This module implements the schedule evaluator, the greedy Schrage
sequencer and the baseline heuristics for a single machine where every
job has a release time, a processing time and a delivery (tail) time.

Every algorithm is deterministic: given the same jobs, it will always
produce the same schedule. Ties are broken by the ordering keys below,
never by the incidental order of a sort or a heap.
"""

from itertools import permutations
from typing import Iterable, List, Optional, Tuple

from .types import JobRecord, Schedule


DEFAULT_PERMUTATION_LIMIT = 8


def release_key(job: JobRecord) -> Tuple[int, int, int]:
    """
    Order in which jobs leave the pending pool.

    Earliest release first; among equal releases the Schrage rule
    decides (largest delivery), then the smallest id.
    """
    return (job.release, -job.delivery, job.id)


def priority_key(job: JobRecord) -> Tuple[int, int]:
    """
    The Schrage priority rule: among released jobs, run the one whose
    delivery time is largest, smallest id first on ties.
    """
    return (-job.delivery, job.id)


def outranks(candidate: JobRecord, running: JobRecord) -> bool:
    """True if candidate has strictly higher priority than running."""
    return candidate.delivery > running.delivery


def evaluate(sequence: Iterable, include_delivery: bool = True) -> int:
    """
    Evaluate a sequence of jobs (or segments) on the machine.

    The first pass simulates processing: each item starts once the
    machine is free and the item is released. The second pass folds in
    the delivery tails, so the result is the largest completion time plus
    delivery over all items, and never less than the makespan.

    Args:
        sequence: Items exposing release, processing and delivery
        include_delivery: False returns the makespan only

    Returns:
        Criterion value, or makespan when include_delivery is False
    """
    clock = 0
    exits = []
    for item in sequence:
        clock = max(clock, item.release)
        clock += item.processing
        exits.append(clock + item.delivery)

    if not include_delivery:
        return clock

    result = clock
    for exit_time in exits:
        result = max(result, exit_time)
    return result


def verify_schedule(jobs: List[JobRecord], schedule: Schedule) -> None:
    """
    Assert the schedule conserves work and charges each delivery once.

    For every job the segment amounts must add up to its processing
    time, and exactly its last segment carries the delivery charge.
    """
    seen = {}
    for segment in schedule:
        assert segment.job_id not in seen or not seen[segment.job_id][1], \
            f"job {segment.job_id} has work after its delivery-charged segment"
        done, _ = seen.get(segment.job_id, (0, False))
        seen[segment.job_id] = (done + segment.amount, segment.delivery_charged)

    assert set(seen) == {job.id for job in jobs}, "schedule and input ids differ"
    for job in jobs:
        done, charged = seen[job.id]
        assert done == job.processing, \
            f"job {job.id}: {done} units scheduled, {job.processing} required"
        assert charged, f"job {job.id} never charged its delivery"


def run_greedy(jobs: List[JobRecord]) -> Tuple[Schedule, int]:
    """
    Schrage's algorithm as a greedy list scheduler.

    Algorithm:
    1. Start with the earliest released job
    2. Among jobs released before the machine clock, append the one
       with the largest delivery time
    3. If none is released yet, append the earliest released job
       (the machine idles until it arrives)
    4. Recompute the clock from the partial sequence and repeat

    Args:
        jobs: Jobs to sequence

    Returns:
        Schedule with one segment per job, and its criterion value
    """
    if not jobs:
        return Schedule(), 0

    remaining = list(jobs)
    seed = min(remaining, key=release_key)
    remaining.remove(seed)
    output = [seed]
    clock = evaluate(output, include_delivery=False)

    while remaining:
        available = [job for job in remaining if job.release < clock]
        if available:
            chosen = min(available, key=priority_key)
        else:
            chosen = min(remaining, key=release_key)

        remaining.remove(chosen)
        output.append(chosen)
        clock = evaluate(output, include_delivery=False)

    schedule = Schedule.from_jobs(output)
    verify_schedule(jobs, schedule)
    return schedule, evaluate(output, include_delivery=True)


def sort_by_release(jobs: List[JobRecord]) -> Tuple[Schedule, int]:
    """Sequence jobs by release time (earliest first)."""
    ordered = sorted(jobs, key=lambda job: (job.release, job.id))
    return Schedule.from_jobs(ordered), evaluate(ordered)


def sort_by_delivery(jobs: List[JobRecord]) -> Tuple[Schedule, int]:
    """Sequence jobs by delivery time (smallest first)."""
    ordered = sorted(jobs, key=lambda job: (job.delivery, job.id))
    return Schedule.from_jobs(ordered), evaluate(ordered)


def sort_by_release_plus_processing(jobs: List[JobRecord]) -> Tuple[Schedule, int]:
    """Sequence jobs by the earliest moment they could finish, r + p."""
    ordered = sorted(jobs, key=lambda job: (job.release + job.processing, job.id))
    return Schedule.from_jobs(ordered), evaluate(ordered)


def permutation_search(
    jobs: List[JobRecord],
    limit: int = DEFAULT_PERMUTATION_LIMIT
) -> Tuple[Schedule, int]:
    """
    Exhaustive search over every job order.

    Orders are visited lexicographically by job id and the first order
    reaching the best value wins. The cost grows factorially, so the
    search refuses instances larger than limit.

    Args:
        jobs: Jobs to sequence
        limit: Largest number of jobs the search accepts

    Returns:
        The best schedule found, and its criterion value

    Raises:
        ValueError: If there are more jobs than limit
    """
    if len(jobs) > limit:
        raise ValueError(
            f"Permutation search is limited to {limit} jobs, got {len(jobs)}"
        )

    best_order: List[JobRecord] = []
    best_value: Optional[int] = None
    for order in permutations(sorted(jobs, key=lambda job: job.id)):
        value = evaluate(order)
        if best_value is None or value < best_value:
            best_value = value
            best_order = list(order)

    return Schedule.from_jobs(best_order), best_value or 0


def calculate_schedule_metrics(schedule: Schedule, jobs: List[JobRecord]) -> dict:
    """
    Calculate metrics about a produced schedule.

    Args:
        schedule: Schedule returned by a sequencer
        jobs: Original list of jobs

    Returns:
        Dictionary containing schedule metrics
    """
    clock = 0
    idle_time = 0
    late_job_id = None
    latest_exit = None
    for segment in schedule:
        if segment.release > clock:
            idle_time += segment.release - clock
            clock = segment.release
        clock += segment.amount
        if segment.delivery_charged:
            exit_time = clock + segment.delivery
            if latest_exit is None or exit_time > latest_exit:
                latest_exit = exit_time
                late_job_id = segment.job_id

    return {
        "jobs_scheduled": len(schedule.job_order()),
        "jobs_total": len(jobs),
        "segments": len(schedule),
        "preemptions": schedule.preemption_count(),
        "makespan": evaluate(schedule, include_delivery=False),
        "criterion_value": evaluate(schedule, include_delivery=True),
        "idle_time": idle_time,
        "late_job_id": late_job_id,
    }
