"""
Unit tests for the evaluator, the greedy sequencer and the baselines.

Run with: pytest tests/test_algorithm.py
"""

import pytest
from dataclasses import FrozenInstanceError

from sequencer.types import JobRecord, Segment, Schedule
from sequencer.algorithm import (
    evaluate,
    release_key,
    priority_key,
    outranks,
    verify_schedule,
    run_greedy,
    sort_by_release,
    sort_by_delivery,
    sort_by_release_plus_processing,
    permutation_search,
    calculate_schedule_metrics
)
from conftest import make_jobs


class TestJobRecord:
    """Test job validation."""

    def test_negative_values_rejected(self):
        """Release, processing and delivery cannot be negative."""
        with pytest.raises(ValueError):
            JobRecord(1, -1, 2, 3)
        with pytest.raises(ValueError):
            JobRecord(1, 0, -2, 3)
        with pytest.raises(ValueError):
            JobRecord(1, 0, 2, -3)

    def test_id_must_be_positive(self):
        """Ids are 1-based."""
        with pytest.raises(ValueError):
            JobRecord(0, 0, 1, 1)

    def test_immutable(self):
        """Jobs cannot be changed after creation."""
        job = JobRecord(1, 0, 1, 1)
        with pytest.raises(FrozenInstanceError):
            job.processing = 5

    def test_uncharged_segment_has_no_delivery(self):
        """Only the delivery-charged segment reports the tail."""
        job = JobRecord(1, 2, 5, 7)

        assert Segment(job, 3, delivery_charged=False).delivery == 0
        assert Segment(job, 2).delivery == 7
        assert Segment(job, 2).release == 2


class TestOrderingKeys:
    """Test the shared ordering rules."""

    def test_priority_prefers_largest_delivery(self):
        """Largest delivery first, smaller id on ties."""
        jobs = make_jobs([(0, 1, 3), (0, 1, 8), (0, 1, 8)])

        ordered = sorted(jobs, key=priority_key)

        assert [j.id for j in ordered] == [2, 3, 1]

    def test_release_order(self):
        """Earliest release first, then largest delivery, then id."""
        jobs = make_jobs([(5, 1, 1), (2, 1, 1), (2, 1, 6), (2, 1, 6)])

        ordered = sorted(jobs, key=release_key)

        assert [j.id for j in ordered] == [3, 4, 2, 1]

    def test_outranks_is_strict(self):
        """Equal delivery never outranks."""
        a, b, c = make_jobs([(0, 1, 5), (0, 1, 5), (0, 1, 6)])

        assert not outranks(b, a)
        assert outranks(c, a)
        assert not outranks(a, c)


class TestEvaluator:
    """Test the two-pass schedule evaluator."""

    def test_worked_example(self, three_jobs):
        """Clock reaches 9; the largest exit is job 1 at 15."""
        assert evaluate(three_jobs, include_delivery=False) == 9
        assert evaluate(three_jobs, include_delivery=True) == 15

    def test_empty_sequence(self):
        """Nothing to run evaluates to zero."""
        assert evaluate([], include_delivery=True) == 0
        assert evaluate([], include_delivery=False) == 0

    def test_idle_until_release(self):
        """The machine waits for a late release."""
        jobs = make_jobs([(0, 2, 0), (10, 1, 0)])

        assert evaluate(jobs, include_delivery=False) == 11

    def test_full_value_never_below_makespan(self, reference_jobs):
        """Including deliveries can only raise the value."""
        orders = [reference_jobs, list(reversed(reference_jobs)), reference_jobs[2:] + reference_jobs[:2]]
        for order in orders:
            assert evaluate(order, True) >= evaluate(order, False)

    def test_idempotent(self, reference_jobs):
        """Evaluating the same sequence twice gives the same value."""
        assert evaluate(reference_jobs) == evaluate(reference_jobs)

    def test_evaluates_segments(self):
        """Uncharged segments contribute no delivery."""
        job1, job2 = make_jobs([(0, 5, 1), (2, 2, 10)])
        schedule = Schedule([
            Segment(job1, 2, delivery_charged=False),
            Segment(job2, 2),
            Segment(job1, 3),
        ])

        assert evaluate(schedule, include_delivery=False) == 7
        assert evaluate(schedule, include_delivery=True) == 14


class TestGreedySequencer:
    """Test the greedy Schrage sequencer."""

    def test_reference_instance(self, reference_jobs):
        """Reaches the known optimum with the known order."""
        schedule, value = run_greedy(reference_jobs)

        assert value == 32
        assert schedule.job_order() == [1, 5, 3, 2, 4, 6]

    def test_worked_example(self, three_jobs):
        """Starts with the earliest release, then waits for job 1."""
        schedule, value = run_greedy(three_jobs)

        assert schedule.job_order() == [3, 1, 2]
        assert value == 15

    def test_empty_input(self):
        """Empty input gives an empty schedule and zero."""
        schedule, value = run_greedy([])

        assert schedule.segments == []
        assert value == 0

    def test_one_full_segment_per_job(self, reference_jobs):
        """Every job runs once with its whole processing time."""
        schedule, _ = run_greedy(reference_jobs)

        assert len(schedule) == len(reference_jobs)
        for segment in schedule:
            assert segment.delivery_charged
            assert segment.amount == segment.job.processing

    def test_available_means_released_before_clock(self):
        """A job released exactly at the clock is not yet available."""
        jobs = make_jobs([(0, 2, 1), (2, 1, 9), (1, 3, 5)])

        schedule, value = run_greedy(jobs)

        assert schedule.job_order() == [1, 3, 2]
        assert value == 15

    def test_idles_when_nothing_released(self):
        """With nothing available the next release is taken."""
        jobs = make_jobs([(0, 2, 3), (5, 1, 1)])

        schedule, value = run_greedy(jobs)

        assert schedule.job_order() == [1, 2]
        assert value == 7

    def test_equal_deliveries_break_by_id(self):
        """Ties on delivery go to the smaller id."""
        jobs = make_jobs([(0, 3, 1), (1, 1, 4), (1, 1, 4)])

        schedule, _ = run_greedy(jobs)

        assert schedule.job_order() == [1, 2, 3]

    def test_input_untouched(self, reference_jobs):
        """The caller's list is not consumed."""
        before = list(reference_jobs)

        run_greedy(reference_jobs)

        assert reference_jobs == before


class TestBaselines:
    """Test the single-key heuristics and the exhaustive search."""

    def test_sort_by_release(self, reference_jobs):
        schedule, value = sort_by_release(reference_jobs)

        assert schedule.job_order() == [1, 3, 2, 5, 4, 6]
        assert value == 34

    def test_sort_by_delivery(self, reference_jobs):
        """Shortest tail first, the plain single-key baseline."""
        schedule, value = sort_by_delivery(reference_jobs)

        assert schedule.job_order() == [6, 4, 2, 3, 5, 1]
        assert value == 52

    def test_sort_by_release_plus_processing(self, reference_jobs):
        schedule, value = sort_by_release_plus_processing(reference_jobs)

        assert schedule.job_order() == [3, 1, 5, 6, 2, 4]
        assert value == 36

    def test_permutation_search_finds_optimum(self, reference_jobs):
        """The exhaustive search agrees with the known optimum."""
        schedule, value = permutation_search(reference_jobs)

        assert value == 32
        assert evaluate(schedule) == 32
        assert sorted(schedule.job_order()) == [1, 2, 3, 4, 5, 6]

    def test_permutation_search_limit(self, reference_jobs):
        """Instances above the limit are refused."""
        with pytest.raises(ValueError):
            permutation_search(reference_jobs, limit=5)

    def test_permutation_search_empty(self):
        schedule, value = permutation_search([])

        assert schedule.segments == []
        assert value == 0

    def test_permutation_search_never_beaten(self, three_jobs):
        """No heuristic beats the exhaustive search."""
        _, best = permutation_search(three_jobs)

        for heuristic in (run_greedy, sort_by_release, sort_by_delivery, sort_by_release_plus_processing):
            _, value = heuristic(three_jobs)
            assert value >= best


class TestVerifySchedule:
    """Test the schedule invariant check."""

    def test_missing_work_fails(self):
        """Segments that do not add up to the processing time are a defect."""
        job = JobRecord(1, 0, 4, 1)

        with pytest.raises(AssertionError):
            verify_schedule([job], Schedule([Segment(job, 3)]))

    def test_work_after_delivery_fails(self):
        """The delivery-charged segment must be the last one."""
        job = JobRecord(1, 0, 4, 1)
        schedule = Schedule([Segment(job, 2), Segment(job, 2, delivery_charged=False)])

        with pytest.raises(AssertionError):
            verify_schedule([job], schedule)

    def test_valid_split(self):
        job = JobRecord(1, 0, 4, 1)
        schedule = Schedule([Segment(job, 1, delivery_charged=False), Segment(job, 3)])

        verify_schedule([job], schedule)


class TestMetrics:
    """Test schedule metrics calculation."""

    def test_basic_metrics(self, three_jobs):
        """Should calculate correct metrics."""
        schedule, _ = run_greedy(three_jobs)

        metrics = calculate_schedule_metrics(schedule, three_jobs)

        assert metrics['jobs_scheduled'] == 3
        assert metrics['segments'] == 3
        assert metrics['preemptions'] == 0
        assert metrics['makespan'] == 8
        assert metrics['criterion_value'] == 15
        assert metrics['idle_time'] == 0
        assert metrics['late_job_id'] == 1

    def test_idle_time(self):
        """Gaps waiting for releases are counted."""
        jobs = make_jobs([(0, 2, 3), (5, 1, 1)])
        schedule, _ = run_greedy(jobs)

        metrics = calculate_schedule_metrics(schedule, jobs)

        assert metrics['idle_time'] == 3
        assert metrics['makespan'] == 6
        assert metrics['late_job_id'] == 2

    def test_empty_schedule(self):
        metrics = calculate_schedule_metrics(Schedule(), [])

        assert metrics['criterion_value'] == 0
        assert metrics['late_job_id'] is None


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
