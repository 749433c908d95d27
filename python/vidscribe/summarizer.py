from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional


logger = logging.getLogger(__name__)

GENERATION_CONFIG: dict[str, Any] = {
    "temperature": 1,
    "top_p": 0.95,
    "top_k": 64,
    "max_output_tokens": 65536,
    "response_mime_type": "text/plain",
}


class SummaryError(RuntimeError):
    pass


def load_system_prompt(path: Optional[Path]) -> Optional[str]:
    """Read a system prompt from ``path``; blank files count as no prompt."""
    if path is None:
        return None
    try:
        prompt = path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise SummaryError(f"Could not read summary prompt {path}: {exc}") from exc
    return prompt or None


def summarize_transcript(
    transcript: str,
    *,
    api_key: str,
    model: str,
    system_prompt: Optional[str] = None,
) -> str:
    """Summarise ``transcript`` and return the model's prose.

    Raises:
        SummaryError: If no API key is configured or the model call fails.
    """
    if not api_key:
        raise SummaryError("Missing GEMINI_API_KEY environment variable; cannot summarise")

    try:
        import google.generativeai as genai
    except ImportError as exc:  # pragma: no cover - env dependent
        raise SummaryError("The google-generativeai package is missing. Install vidscribe's dependencies.") from exc

    genai.configure(api_key=api_key)
    try:
        logger.info("Calling generative model %s for summarisation", model)
        generative_model = genai.GenerativeModel(
            model,
            system_instruction=system_prompt,
            generation_config=GENERATION_CONFIG,
        )
        response = generative_model.generate_content(transcript)
        text = response.text
    except Exception as exc:  # noqa: BLE001 - provider error typing is broad
        raise SummaryError(f"Gemini summarisation failed: {exc}") from exc

    return (text or "").strip()
