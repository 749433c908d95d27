from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv


DEFAULT_TRANSCRIBE_MODEL = "whisper-1"
DEFAULT_SUMMARY_MODEL = "gemini-2.5-pro-exp-03-25"
DEFAULT_RATE_PER_MINUTE = 0.006


class ConfigError(RuntimeError):
    pass


def _env(name: str) -> str:
    return os.environ.get(name, "").strip()


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True, slots=True)
class Settings:
    openai_api_key: str
    gemini_api_key: str
    transcribe_model: str = DEFAULT_TRANSCRIBE_MODEL
    transcribe_language: str | None = None
    summary_model: str = DEFAULT_SUMMARY_MODEL
    rate_per_minute: float = DEFAULT_RATE_PER_MINUTE

    @property
    def summary_enabled(self) -> bool:
        return bool(self.gemini_api_key)

    def require_transcription(self) -> None:
        if not self.openai_api_key:
            raise ConfigError("Missing OPENAI_API_KEY environment variable")


def load_settings(*, dotenv: bool = True) -> Settings:
    """Read settings from the environment, honouring a local ``.env`` file."""
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    return Settings(
        openai_api_key=_env("OPENAI_API_KEY"),
        gemini_api_key=_env("GEMINI_API_KEY"),
        transcribe_model=_env("OPENAI_TRANSCRIBE_MODEL") or DEFAULT_TRANSCRIBE_MODEL,
        transcribe_language=_env("OPENAI_TRANSCRIBE_LANGUAGE") or None,
        summary_model=_env("GEMINI_MODEL") or DEFAULT_SUMMARY_MODEL,
        rate_per_minute=_env_float("TRANSCRIBE_RATE_PER_MINUTE", DEFAULT_RATE_PER_MINUTE),
    )
