"""Distribution summaries for numeric sample sets.

Percentiles use the nearest-rank rule without interpolation: the value at
sorted index ``floor(pct / 100 * (n - 1))``.
"""

import math
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict


class SampleStatistics(BaseModel):
    """Summary of one sample set."""

    model_config = ConfigDict(frozen=True)

    count: int
    avg: float
    min: float
    max: float
    p95: float
    p99: float
    is_stable: bool
    has_outliers: bool


def percentile(sorted_values: Sequence[float], pct: float) -> float:
    """Return the nearest-rank percentile of an already sorted sequence.

    Args:
        sorted_values: Values in ascending order (non-empty).
        pct: Percentile in [0, 100].

    Returns:
        ``sorted_values[floor(pct / 100 * (n - 1))]``.

    Raises:
        ValueError: If the sequence is empty or pct is out of range.
    """
    if not sorted_values:
        raise ValueError("percentile of an empty sample is undefined")
    if not 0 <= pct <= 100:
        raise ValueError(f"percentile must be in [0, 100], got {pct}")
    # Integer arithmetic keeps the floor exact
    index = int((pct * (len(sorted_values) - 1)) // 100)
    return sorted_values[index]


def summarize(samples: Sequence[float]) -> SampleStatistics:
    """Compute avg/min/max/p95/p99 and stability flags for a sample set.

    An empty sample summarizes to zeros, unstable and without outliers.
    """
    if not samples:
        return SampleStatistics(
            count=0,
            avg=0.0,
            min=0.0,
            max=0.0,
            p95=0.0,
            p99=0.0,
            is_stable=False,
            has_outliers=False,
        )

    ordered = sorted(samples)
    avg = math.fsum(ordered) / len(ordered)
    low, high = ordered[0], ordered[-1]

    return SampleStatistics(
        count=len(ordered),
        avg=avg,
        min=low,
        max=high,
        p95=percentile(ordered, 95),
        p99=percentile(ordered, 99),
        is_stable=(high - low) < avg * 0.5,
        has_outliers=high > avg * 3,
    )
