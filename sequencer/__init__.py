"""
RPQ Sequencer Package

Deterministic sequencing of jobs with release, processing and delivery
times on a single machine, minimising the latest completion plus delivery.
"""

__version__ = '0.1.0'

from .types import (
    Algorithm,
    JobRecord,
    Segment,
    Schedule,
    SequencingResult
)

from .algorithm import (
    evaluate,
    release_key,
    priority_key,
    outranks,
    run_greedy,
    sort_by_release,
    sort_by_delivery,
    sort_by_release_plus_processing,
    permutation_search,
    calculate_schedule_metrics
)

from .simulation import run_event_simulation, run_preemptive
from .loader import InstanceFormatError, parse_instance, load_instance
from .runner import run_algorithm, compare_algorithms
from .timing import Stopwatch
from .server import create_app, run_server

__all__ = [
    'Algorithm',
    'JobRecord',
    'Segment',
    'Schedule',
    'SequencingResult',
    'evaluate',
    'release_key',
    'priority_key',
    'outranks',
    'run_greedy',
    'sort_by_release',
    'sort_by_delivery',
    'sort_by_release_plus_processing',
    'permutation_search',
    'calculate_schedule_metrics',
    'run_event_simulation',
    'run_preemptive',
    'InstanceFormatError',
    'parse_instance',
    'load_instance',
    'run_algorithm',
    'compare_algorithms',
    'Stopwatch',
    'create_app',
    'run_server',
]
