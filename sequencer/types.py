"""
Data models for the sequencer.

This module defines the core data structures used in sequencing:
- Jobs to be sequenced on the single machine
- Segments of work produced by a sequencing run
- Schedules made of segments, and timed results
"""

from dataclasses import dataclass, field
from typing import Iterator, List
from enum import Enum


class Algorithm(Enum):
    """Sequencing algorithms known to the runner."""
    PERMUTATION = "permutation"
    SORT_RELEASE = "sort_release"
    SORT_DELIVERY = "sort_delivery"
    SORT_RELEASE_PROCESSING = "sort_release_processing"
    SCHRAGE = "schrage"
    SCHRAGE_EVENT = "schrage_event"
    SCHRAGE_PREEMPTIVE = "schrage_preemptive"


@dataclass(frozen=True)
class JobRecord:
    """
    A job to be sequenced.

    Attributes:
        id: 1-based identifier, the job's line number in the instance
        release: Earliest time the job may start
        processing: Machine time the job needs
        delivery: Tail time after processing before the job is done
    """
    id: int
    release: int
    processing: int
    delivery: int

    def __post_init__(self):
        """Validate job fields."""
        if self.id < 1:
            raise ValueError(f"Job id must be positive, got {self.id}")
        for name in ('release', 'processing', 'delivery'):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"Job {self.id}: {name} cannot be negative, got {value}")


@dataclass(frozen=True)
class Segment:
    """
    A contiguous run of work for one job.

    Only the last segment of a job charges its delivery time, so an
    uncharged segment reports a delivery of zero to the evaluator.

    Attributes:
        job: The job this work belongs to
        amount: Units of processing done in this segment
        delivery_charged: Whether the job's delivery time counts here
    """
    job: JobRecord
    amount: int
    delivery_charged: bool = True

    @property
    def job_id(self) -> int:
        return self.job.id

    @property
    def release(self) -> int:
        return self.job.release

    @property
    def processing(self) -> int:
        return self.amount

    @property
    def delivery(self) -> int:
        return self.job.delivery if self.delivery_charged else 0


@dataclass
class Schedule:
    """
    Ordered segments produced by one sequencing run.

    Attributes:
        segments: Segments in the order the machine runs them
    """
    segments: List[Segment] = field(default_factory=list)

    @classmethod
    def from_jobs(cls, jobs: List[JobRecord]) -> 'Schedule':
        """Build a non-preemptive schedule, one full segment per job."""
        return cls([Segment(job, job.processing) for job in jobs])

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def job_order(self) -> List[int]:
        """Job ids in the order their final segments complete."""
        return [s.job_id for s in self.segments if s.delivery_charged]

    def segments_for(self, job_id: int) -> List[Segment]:
        return [s for s in self.segments if s.job_id == job_id]

    def preemption_count(self) -> int:
        return sum(1 for s in self.segments if not s.delivery_charged)


@dataclass
class SequencingResult:
    """
    Outcome of running one algorithm.

    Attributes:
        algorithm: The algorithm that produced the schedule
        schedule: The produced schedule
        value: Criterion value, max over jobs of completion plus delivery
        elapsed_ms: Wall-clock time of the run in milliseconds
    """
    algorithm: Algorithm
    schedule: Schedule
    value: int
    elapsed_ms: float = 0.0
