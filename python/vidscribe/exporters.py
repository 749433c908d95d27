from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Iterable

from .models import Segment


TRANSCRIPT_SUFFIX = "_transcript.txt"
SUMMARY_SUFFIX = "_summary.md"


def format_timestamp(seconds: float) -> str:
    """Format ``seconds`` as ``HH:MM:SS,mmm``.

    Hours are not wrapped at 24; recordings longer than a day get a wider hour
    field instead.
    """
    value = float(seconds)
    if not math.isfinite(value):
        raise ValueError(f"Cannot format non-finite timestamp: {seconds!r}")
    safe_seconds = Decimal(str(max(0.0, value)))
    total_ms = int((safe_seconds * 1000).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    total_sec, millis = divmod(total_ms, 1000)
    hours, remainder = divmod(total_sec, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def format_segment(segment: Segment) -> str:
    return f"[{format_timestamp(segment.start_sec)} --> {format_timestamp(segment.end_sec)}] {segment.text}"


def format_segments(segments: Iterable[Segment]) -> str:
    return "\n".join(format_segment(segment) for segment in segments)


def transcript_path_for(source: Path) -> Path:
    return source.with_name(f"{source.stem}{TRANSCRIPT_SUFFIX}")


def summary_path_for(source: Path) -> Path:
    return source.with_name(f"{source.stem}{SUMMARY_SUFFIX}")


def export_txt(text: str, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    return output_path
