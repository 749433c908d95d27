from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .audio import MediaError
from .config import ConfigError, load_settings
from .openai_engine import TranscriptionError
from .pipeline import PipelineError, run_pipeline
from .segmenter import parse_splits
from .summarizer import SummaryError, load_system_prompt


logger = logging.getLogger("vidscribe")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vidscribe",
        description="Convert a video to audio, transcribe it with OpenAI and summarise it with Gemini.",
    )
    parser.add_argument("source", type=Path, help="Path to the input media file (e.g. input.mp4).")
    parser.add_argument(
        "splits",
        nargs="?",
        default=None,
        help="Optional comma separated split points in seconds (e.g. 600,1200).",
    )
    parser.add_argument(
        "--prompt-file",
        type=Path,
        default=None,
        help="File holding the system prompt used for the summary.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
        settings.require_transcription()
    except ConfigError as exc:
        logger.error("%s", exc)
        return 1

    if not settings.summary_enabled:
        logger.warning("Missing GEMINI_API_KEY environment variable; summarisation will fail")

    source = Path(args.source).expanduser()
    try:
        system_prompt = load_system_prompt(args.prompt_file)
        result = run_pipeline(
            source,
            parse_splits(args.splits),
            settings=settings,
            system_prompt=system_prompt,
        )
    except (MediaError, TranscriptionError, SummaryError, PipelineError) as exc:
        logger.error("%s", exc)
        return 1

    logger.info(
        "Transcription and summarization complete: %d segment(s), %.3fs of audio.",
        result.segment_count,
        result.duration_sec,
    )
    return 0

