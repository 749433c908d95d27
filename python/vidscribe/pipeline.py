from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import Callable, Sequence

from . import audio
from .config import Settings
from .exporters import export_txt, format_segments, summary_path_for, transcript_path_for
from .merge import merge_chunks
from .models import ChunkTranscript, CostLedger, Interval, PipelineResult, Segment
from .openai_engine import transcribe_file_openai
from .segmenter import plan_intervals
from .summarizer import summarize_transcript


logger = logging.getLogger(__name__)

Transcriber = Callable[[Path], list[Segment]]
Summarizer = Callable[[str], str]


class PipelineError(RuntimeError):
    pass


def audio_path_for(source: Path) -> Path:
    return source.with_suffix(".mp3")


def prepare_audio(source: Path) -> Path:
    if source.suffix.lower() == ".mp3":
        logger.info('Input "%s" is already MP3, skipping conversion.', source)
        return source

    audio_path = audio_path_for(source)
    logger.info('Starting conversion of "%s" to MP3...', source)
    audio.convert_to_mp3(source, audio_path)
    logger.info('Finished converting to MP3 at "%s".', audio_path)
    return audio_path


def transcribe_intervals(
    audio_path: Path,
    intervals: Sequence[Interval],
    transcribe: Transcriber,
    ledger: CostLedger,
) -> tuple[list[ChunkTranscript], CostLedger]:
    """Extract and transcribe each interval in order, one at a time."""
    chunks: list[ChunkTranscript] = []
    total = len(intervals)
    for position, interval in enumerate(intervals, start=1):
        logger.info(
            "Transcribing chunk %d/%d (%.3fs - %.3fs)...",
            position,
            total,
            interval.start_sec,
            interval.end_sec,
        )
        with audio.chunk_file(audio_path, interval) as chunk_path:
            segments = transcribe(chunk_path)
        chunks.append(ChunkTranscript(interval=interval, segments=tuple(segments)))
        ledger = ledger.add(interval.duration_sec)
        logger.info("Done transcribing chunk %d/%d (%d segment(s)).", position, total, len(segments))
    return chunks, ledger


def transcribe_whole(
    audio_path: Path,
    duration_sec: float,
    transcribe: Transcriber,
    ledger: CostLedger,
) -> tuple[list[ChunkTranscript], CostLedger]:
    logger.info("No time splits specified. Transcribing the entire audio file...")
    segments = transcribe(audio_path)
    whole = Interval(idx=0, start_sec=0.0, end_sec=duration_sec)
    logger.info("Done transcribing entire file (%d segment(s)).", len(segments))
    return [ChunkTranscript(interval=whole, segments=tuple(segments))], ledger.add(duration_sec)


def run_pipeline(
    source: Path,
    splits: Sequence[float],
    *,
    settings: Settings,
    system_prompt: str | None = None,
    transcribe: Transcriber | None = None,
    summarize: Summarizer | None = None,
) -> PipelineResult:
    if transcribe is None:
        transcribe = partial(
            transcribe_file_openai,
            api_key=settings.openai_api_key,
            model=settings.transcribe_model,
            language=settings.transcribe_language,
        )
    if summarize is None:
        summarize = partial(
            summarize_transcript,
            api_key=settings.gemini_api_key,
            model=settings.summary_model,
            system_prompt=system_prompt,
        )

    audio_path = prepare_audio(source)
    duration = audio.probe_duration_seconds(audio_path)
    logger.info("Audio duration: %.3fs", duration)

    intervals = plan_intervals(duration, splits)
    if not intervals:
        raise PipelineError(f"Nothing to transcribe: {audio_path} has no audio (duration {duration}s)")

    ledger = CostLedger(rate_per_minute=settings.rate_per_minute)
    if splits:
        logger.info("Time splits detected. Splitting audio into %d chunk(s).", len(intervals))
        chunks, ledger = transcribe_intervals(audio_path, intervals, transcribe, ledger)
    else:
        chunks, ledger = transcribe_whole(audio_path, duration, transcribe, ledger)

    logger.info("Generating final transcript...")
    segments = merge_chunks(chunks)
    transcript = format_segments(segments)
    transcript_path = export_txt(transcript, transcript_path_for(source))
    logger.info("Transcript saved to: %s", transcript_path)

    logger.info("Summarizing the transcript...")
    summary = summarize(transcript)
    summary_path = export_txt(summary, summary_path_for(source))
    logger.info("Summary saved to: %s", summary_path)

    logger.info("Total cost for transcription: $%.4f", ledger.total)
    return PipelineResult(
        audio_path=audio_path,
        transcript_path=transcript_path,
        summary_path=summary_path,
        duration_sec=duration,
        segment_count=len(segments),
        cost=ledger,
    )
