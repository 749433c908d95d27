from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Segment:
    start_sec: float
    end_sec: float
    text: str

    def shifted(self, offset_sec: float) -> "Segment":
        return replace(self, start_sec=self.start_sec + offset_sec, end_sec=self.end_sec + offset_sec)


@dataclass(frozen=True, slots=True)
class Interval:
    idx: int
    start_sec: float
    end_sec: float

    @property
    def duration_sec(self) -> float:
        return max(0.0, self.end_sec - self.start_sec)


@dataclass(frozen=True, slots=True)
class ChunkTranscript:
    interval: Interval
    segments: tuple[Segment, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class CostLedger:
    """Billable audio seconds and the per-minute rate they are charged at."""

    rate_per_minute: float
    billed_sec: float = 0.0

    def add(self, seconds: float) -> "CostLedger":
        return replace(self, billed_sec=self.billed_sec + max(0.0, seconds))

    @property
    def total(self) -> float:
        return self.billed_sec / 60 * self.rate_per_minute


@dataclass(frozen=True, slots=True)
class PipelineResult:
    audio_path: Path
    transcript_path: Path
    summary_path: Path
    duration_sec: float
    segment_count: int
    cost: CostLedger
