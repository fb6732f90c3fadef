"""
Instance loading.

An instance is plain text: a header line with the job count N, then N
lines of "release processing delivery" as whitespace-separated integers.
Jobs get ids 1..N in line order. Blank lines are ignored.

The loader raises InstanceFormatError and leaves it to the caller (the
command line or the HTTP layer) to decide what to do about it.
"""

import logging
from typing import List

from .types import JobRecord


logger = logging.getLogger(__name__)


class InstanceFormatError(ValueError):
    """The instance text or file is malformed."""


def parse_instance(text: str) -> List[JobRecord]:
    """
    Parse instance text into job records.

    Args:
        text: Instance in the "N, then N rows" format

    Returns:
        Jobs in line order, ids starting at 1

    Raises:
        InstanceFormatError: On a missing or bad header, a malformed or
            negative row, or a row count different from the header
    """
    lines = [(number, line.split()) for number, line in enumerate(text.splitlines(), start=1)]
    lines = [(number, fields) for number, fields in lines if fields]

    if not lines:
        raise InstanceFormatError("Instance is empty")

    header_line, header = lines[0]
    if len(header) != 1:
        raise InstanceFormatError(f"Line {header_line}: header must hold only the job count")
    try:
        declared = int(header[0])
    except ValueError:
        raise InstanceFormatError(f"Line {header_line}: job count is not an integer: {header[0]!r}")
    if declared < 0:
        raise InstanceFormatError(f"Line {header_line}: job count cannot be negative")

    jobs = []
    for job_id, (number, fields) in enumerate(lines[1:], start=1):
        if len(fields) != 3:
            raise InstanceFormatError(
                f"Line {number}: expected 'release processing delivery', got {len(fields)} fields"
            )
        try:
            release, processing, delivery = (int(value) for value in fields)
        except ValueError:
            raise InstanceFormatError(f"Line {number}: values must be integers")
        try:
            jobs.append(JobRecord(job_id, release, processing, delivery))
        except ValueError as e:
            raise InstanceFormatError(f"Line {number}: {e}")

    if len(jobs) != declared:
        raise InstanceFormatError(
            f"Header declares {declared} jobs, found {len(jobs)}"
        )

    return jobs


def load_instance(path: str) -> List[JobRecord]:
    """
    Load an instance file.

    Args:
        path: Path of the instance file

    Returns:
        Jobs in line order

    Raises:
        InstanceFormatError: If the file cannot be read or is malformed
    """
    try:
        with open(path, encoding='utf-8') as f:
            text = f.read()
    except OSError as e:
        raise InstanceFormatError(f"Cannot read instance {path}: {e}")

    jobs = parse_instance(text)
    logger.info(f"Loaded {len(jobs)} jobs from {path}")
    return jobs
