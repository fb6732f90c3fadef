"""
Event-driven Schrage sequencers.

Both simulators advance an integer clock one unit of work at a time,
moving jobs from a pending heap (ordered by release) into a ready heap
(ordered by the Schrage priority rule). The plain simulator only loads
a new job once the machine is free; the preemptive one interrupts the
running job as soon as a released job outranks it.
"""

import heapq
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .algorithm import evaluate, outranks, priority_key, release_key, verify_schedule
from .types import JobRecord, Schedule, Segment


logger = logging.getLogger(__name__)


@dataclass
class _Work:
    """Working copy of a job: what is left, and what this run has done."""
    job: JobRecord
    remaining: int
    run: int = 0


class _Machine:
    """
    Simulation state shared by both sequencers.

    Args:
        jobs: Jobs to simulate; the records themselves are never modified
    """

    def __init__(self, jobs: List[JobRecord]):
        self.pending = [(release_key(job), _Work(job, job.processing)) for job in jobs]
        heapq.heapify(self.pending)
        self.ready = []
        self.current: Optional[_Work] = None
        self.time = 0
        self.segments: List[Segment] = []

    def busy(self) -> bool:
        return bool(self.pending or self.ready or self.current)

    def admit(self) -> None:
        """Move every job released by now from pending into ready."""
        while self.pending and self.pending[0][1].job.release <= self.time:
            _, work = heapq.heappop(self.pending)
            self.push_ready(work)

    def push_ready(self, work: _Work) -> None:
        heapq.heappush(self.ready, (priority_key(work.job), work))

    def top_ready(self) -> Optional[JobRecord]:
        return self.ready[0][1].job if self.ready else None

    def load(self) -> None:
        """
        Put the top ready job on a free machine.

        Jobs without processing finish the moment they are loaded.
        """
        while self.current is None and self.ready:
            _, work = heapq.heappop(self.ready)
            work.run = 0
            if work.remaining == 0:
                self.segments.append(Segment(work.job, 0, delivery_charged=True))
            else:
                self.current = work

    def idle_until_next_release(self) -> None:
        if self.pending:
            self.time = self.pending[0][1].job.release

    def tick(self) -> None:
        """Process one unit of the current job and advance the clock."""
        work = self.current
        work.remaining -= 1
        work.run += 1
        if work.remaining == 0:
            self.segments.append(Segment(work.job, work.run, delivery_charged=True))
            self.current = None
        self.time += 1

    def preempt(self) -> None:
        """Close the current run without delivery and requeue the rest."""
        work = self.current
        logger.debug(
            "t=%d: job %d preempted by job %d after %d units, %d left",
            self.time, work.job.id, self.top_ready().id, work.run, work.remaining
        )
        self.segments.append(Segment(work.job, work.run, delivery_charged=False))
        self.current = None
        self.push_ready(work)


def run_event_simulation(jobs: List[JobRecord]) -> Tuple[Schedule, int]:
    """
    Schrage's algorithm as a discrete-time event simulation.

    Algorithm, per tick:
    1. Admit every pending job released by the current time
    2. If nothing is ready and the machine is free, jump to the next release
    3. If the machine is free, load the ready job with the largest delivery
    4. Process one unit; a job whose work reaches zero is emitted
    5. Advance the clock by one

    The running job is only replaced when it finishes, so the result is
    non-preemptive and matches the greedy list scheduler.

    Args:
        jobs: Jobs to sequence

    Returns:
        Schedule with one segment per job, and its criterion value
    """
    machine = _Machine(jobs)

    while machine.busy():
        machine.admit()
        machine.load()
        if machine.current is None:
            machine.idle_until_next_release()
            continue
        machine.tick()

    schedule = Schedule(machine.segments)
    verify_schedule(jobs, schedule)
    logger.debug("Event simulation finished at t=%d with %d jobs", machine.time, len(jobs))
    return schedule, evaluate(schedule, include_delivery=True)


def run_preemptive(jobs: List[JobRecord]) -> Tuple[Schedule, int]:
    """
    Schrage's algorithm with preemption (expropriation).

    Runs the same tick loop as run_event_simulation, but after admitting
    new releases the running job is interrupted when the top ready job
    has a strictly larger delivery time. The interrupted job emits a
    segment for the work done so far, without its delivery, and its
    remaining work goes back into the ready heap under the same key.
    The new job is loaded and processed in that same tick.

    Args:
        jobs: Jobs to sequence

    Returns:
        Schedule where a job may span several segments, and its
        criterion value
    """
    machine = _Machine(jobs)

    while machine.busy():
        machine.admit()
        top = machine.top_ready()
        if machine.current is not None and top is not None and outranks(top, machine.current.job):
            machine.preempt()
        machine.load()
        if machine.current is None:
            machine.idle_until_next_release()
            continue
        machine.tick()

    schedule = Schedule(machine.segments)
    verify_schedule(jobs, schedule)
    logger.debug(
        "Preemptive simulation finished at t=%d with %d preemptions",
        machine.time, schedule.preemption_count()
    )
    return schedule, evaluate(schedule, include_delivery=True)
