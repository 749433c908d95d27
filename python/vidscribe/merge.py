from __future__ import annotations

from typing import Iterable

from .models import ChunkTranscript, Segment


def globalize_segments(segments: Iterable[Segment], offset_sec: float) -> list[Segment]:
    return [segment.shifted(offset_sec) for segment in segments]


def merge_chunks(chunks: Iterable[ChunkTranscript]) -> list[Segment]:
    """Put every chunk's segments on the source timeline, ordered by start.

    Segments keep their concatenation order when start times are equal, so
    output is reproducible. Overlapping text is left as the service returned it.
    """
    collected: list[Segment] = []
    for chunk in chunks:
        collected.extend(globalize_segments(chunk.segments, chunk.interval.start_sec))

    return sorted(collected, key=lambda seg: seg.start_sec)
