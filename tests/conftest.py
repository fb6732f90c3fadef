"""
Shared job sets for the sequencer tests.
"""

import pytest

from sequencer.types import JobRecord


def make_jobs(rows):
    """Build jobs from (release, processing, delivery) rows, ids from 1."""
    return [JobRecord(i, r, p, q) for i, (r, p, q) in enumerate(rows, start=1)]


@pytest.fixture
def reference_jobs():
    """Six jobs whose optimum, 32, is reached by the order 1 5 3 2 4 6."""
    return make_jobs([
        (0, 5, 27),
        (2, 4, 14),
        (1, 3, 16),
        (4, 6, 10),
        (3, 2, 20),
        (4, 1, 2),
    ])


@pytest.fixture
def three_jobs():
    return make_jobs([(1, 5, 9), (2, 2, 4), (0, 1, 1)])


@pytest.fixture
def preemptable_jobs():
    """A long low-tail job interrupted by a short high-tail arrival."""
    return make_jobs([(0, 5, 1), (2, 2, 10)])


REFERENCE_INSTANCE = """6
0 5 27
2 4 14
1 3 16
4 6 10
3 2 20
4 1 2
"""
