"""Statistic name validation and canonical forms."""

from collections.abc import Iterable
from typing import TYPE_CHECKING

from cwmetrics.core.errors import ConfigurationError

if TYPE_CHECKING:
    from cwmetrics.core.config import MetricConfig

DEFAULT_STATISTICS = ("Average", "Maximum", "Minimum", "Sum", "SampleCount")

_STATISTIC_LOOKUP = {
    "Average": "avg",
    "Sum": "sum",
    "Maximum": "max",
    "Minimum": "min",
    "SampleCount": "count",
}


def lookup_statistic(name: str) -> tuple[str, bool]:
    """Map a CloudWatch statistic name to its canonical short form.

    Percentile statistics (any name starting with "p", e.g. "p95") are valid
    and returned unchanged.

    Args:
        name: Statistic name as configured (e.g., "Average").

    Returns:
        Tuple of (canonical form, valid). Unknown names are returned
        unchanged with valid=False.
    """
    canonical = _STATISTIC_LOOKUP.get(name)
    if canonical is not None:
        return canonical, True
    return name, name.startswith("p")


def check_statistics(configs: Iterable["MetricConfig"]) -> None:
    """Raise ConfigurationError for the first invalid configured statistic."""
    for config in configs:
        for statistic in config.statistics or ():
            if not lookup_statistic(statistic)[1]:
                raise ConfigurationError(
                    f"statistic method specified is not valid: {statistic}"
                )
