"""Alignment of query results on one common timestamp."""

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import datetime

from cwmetrics.core.errors import MalformedLabelError
from cwmetrics.core.models import Label, QueryResult

logger = logging.getLogger(__name__)


def find_timestamp(results: Iterable[QueryResult]) -> datetime | None:
    """Pick the alignment timestamp for a set of results.

    Returns the timestamp occurring in the most series, preferring the most
    recent one on ties, or None when no series has data.
    """
    counts: Counter[datetime] = Counter()
    for result in results:
        if not result.values:
            continue
        counts.update(set(result.timestamps))
    if not counts:
        return None
    return max(counts, key=lambda ts: (counts[ts], ts))


def value_at(result: QueryResult, timestamp: datetime) -> float | None:
    """Return the value of a series at a timestamp, or None if absent."""
    for ts, value in zip(result.timestamps, result.values):
        if ts == timestamp:
            return value
    return None


def aligned_values(
    results: Iterable[QueryResult], timestamp: datetime
) -> list[tuple[Label, float]]:
    """Decode and extract the value at the alignment timestamp per result.

    Empty series and series without a sample at the timestamp are skipped.
    Malformed labels are logged as errors and skipped.
    """
    aligned: list[tuple[Label, float]] = []
    for result in results:
        if not result.values:
            continue
        value = value_at(result, timestamp)
        if value is None:
            logger.debug("Result %s has no value at %s", result.label, timestamp)
            continue
        try:
            label = Label.decode(result.label)
        except MalformedLabelError as err:
            logger.error(
                "Dropping result %s with malformed label: %s",
                result.id,
                err,
                extra={"label": result.label},
            )
            continue
        aligned.append((label, value))
    return aligned
