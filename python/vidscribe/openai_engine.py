from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .models import Segment


logger = logging.getLogger(__name__)

TEXT_MODEL = "whisper-1"
RESPONSE_FORMAT = "verbose_json"


class TranscriptionError(RuntimeError):
    pass


def _to_dict(value: Any) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    if hasattr(value, "model_dump"):
        return value.model_dump()  # pydantic style
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return dict(value)


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def parse_whisper_segments(payload: dict[str, Any]) -> list[Segment]:
    raw_segments = payload.get("segments")
    if not raw_segments:
        raw_text = str(payload.get("text", "") or "").strip()
        if not raw_text:
            return []
        return [Segment(start_sec=0.0, end_sec=0.0, text=raw_text)]

    segments: list[Segment] = []
    for raw in raw_segments:
        if not isinstance(raw, dict):
            raw = _to_dict(raw)

        text = str(raw.get("text", "") or "").strip()
        if not text:
            continue

        start_value = _as_float(raw.get("start", 0.0), 0.0)
        end_value = _as_float(raw.get("end", start_value), start_value)
        segments.append(Segment(start_sec=start_value, end_sec=end_value, text=text))

    return segments


def transcribe_file_openai(
    audio_path: Path,
    *,
    api_key: str,
    model: str = TEXT_MODEL,
    language: str | None = None,
) -> list[Segment]:
    try:
        from openai import OpenAI
    except ImportError as exc:  # pragma: no cover - env dependent
        raise TranscriptionError("The openai package is missing. Install vidscribe's dependencies.") from exc

    if not api_key:
        raise TranscriptionError("OPENAI_API_KEY is not set")

    client = OpenAI(api_key=api_key)
    request: dict[str, Any] = {"model": model, "response_format": RESPONSE_FORMAT}
    if language:
        request["language"] = language

    try:
        with audio_path.open("rb") as audio_file:
            response = client.audio.transcriptions.create(file=audio_file, **request)
    except Exception as exc:  # noqa: BLE001 - provider error typing is broad
        raise TranscriptionError(f"OpenAI transcription of {audio_path.name} failed: {exc}") from exc

    segments = parse_whisper_segments(_to_dict(response))
    logger.debug("Received %d segment(s) for %s", len(segments), audio_path.name)
    return segments
