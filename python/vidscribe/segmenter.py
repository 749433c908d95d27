from __future__ import annotations

import math
from typing import Iterable

from .models import Interval


def parse_splits(raw: str | None) -> list[float]:
    """Parse a comma separated list of seconds, silently dropping unusable entries."""
    if not raw:
        return []

    splits: list[float] = []
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            value = float(token)
        except ValueError:
            continue
        if math.isnan(value):
            continue
        splits.append(value)
    return splits


def plan_intervals(duration_sec: float, splits: Iterable[float]) -> list[Interval]:
    duration = max(0.0, float(duration_sec))
    # ffmpeg gets millisecond seek/duration values, so boundaries live on that grid
    boundaries = sorted({min(round(max(0.0, float(t)), 3), duration) for t in splits})

    starts = [0.0, *boundaries]
    ends = [*boundaries, duration]

    intervals: list[Interval] = []
    for idx, (start, end) in enumerate(zip(starts, ends)):
        # zero-length pieces come from splits at 0, at the end, or a zero duration;
        # sub-millisecond slivers would render as empty chunks
        if round(end - start, 3) <= 0:
            continue
        intervals.append(Interval(idx=idx, start_sec=start, end_sec=end))
    return intervals
