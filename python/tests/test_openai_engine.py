from __future__ import annotations

import sys
import types
from pathlib import Path

import pytest

from vidscribe import openai_engine
from vidscribe.models import Segment


class FakeTranscriptions:
    def __init__(self, actions: list[object]):
        self.actions = actions
        self.calls: list[dict[str, object]] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if not self.actions:
            raise RuntimeError("no more actions configured")
        action = self.actions.pop(0)
        if isinstance(action, Exception):
            raise action
        return action


class FakeClient:
    def __init__(self, actions: list[object]):
        self.audio = types.SimpleNamespace(transcriptions=FakeTranscriptions(actions))


class FakeResponse:
    def __init__(self, payload: dict[str, object]):
        self.payload = payload

    def model_dump(self) -> dict[str, object]:
        return self.payload


def _install_fake_openai(monkeypatch, client: FakeClient) -> list[str]:
    keys: list[str] = []

    class FakeOpenAIClass:
        def __init__(self, api_key: str):
            keys.append(api_key)
            self.audio = client.audio

    fake_module = types.SimpleNamespace(OpenAI=FakeOpenAIClass)
    monkeypatch.setitem(sys.modules, "openai", fake_module)
    return keys


def _write_dummy_chunk(tmp_path: Path) -> Path:
    chunk_path = tmp_path / "chunk.mp3"
    chunk_path.write_bytes(b"fake-audio")
    return chunk_path


def test_openai_engine_parses_verbose_json_segments(monkeypatch, tmp_path: Path):
    actions = [
        FakeResponse(
            {
                "text": "Hello there. General Kenobi.",
                "segments": [
                    {"start": 0.0, "end": 2.5, "text": " Hello there."},
                    {"start": 2.5, "end": 4.0, "text": "   "},
                    {"start": "4.0", "end": None, "text": " General Kenobi."},
                ],
            }
        )
    ]
    client = FakeClient(actions)
    keys = _install_fake_openai(monkeypatch, client)

    segments = openai_engine.transcribe_file_openai(_write_dummy_chunk(tmp_path), api_key="test-key")

    assert segments == [
        Segment(start_sec=0.0, end_sec=2.5, text="Hello there."),
        Segment(start_sec=4.0, end_sec=4.0, text="General Kenobi."),
    ]
    assert keys == ["test-key"]
    call = client.audio.transcriptions.calls[0]
    assert call["model"] == "whisper-1"
    assert call["response_format"] == "verbose_json"
    assert "language" not in call


def test_openai_engine_passes_model_and_language(monkeypatch, tmp_path: Path):
    client = FakeClient([{"segments": [{"start": 1, "end": 2, "text": "Hej"}]}])
    _install_fake_openai(monkeypatch, client)

    openai_engine.transcribe_file_openai(
        _write_dummy_chunk(tmp_path),
        api_key="k",
        model="whisper-large",
        language="da",
    )

    call = client.audio.transcriptions.calls[0]
    assert call["model"] == "whisper-large"
    assert call["language"] == "da"


def test_openai_engine_falls_back_to_plain_text(monkeypatch, tmp_path: Path):
    client = FakeClient([{"text": " only text "}])
    _install_fake_openai(monkeypatch, client)

    segments = openai_engine.transcribe_file_openai(_write_dummy_chunk(tmp_path), api_key="k")
    assert segments == [Segment(start_sec=0.0, end_sec=0.0, text="only text")]


def test_openai_engine_does_not_retry_provider_errors(monkeypatch, tmp_path: Path):
    client = FakeClient([RuntimeError("The request timed out."), {"segments": []}])
    _install_fake_openai(monkeypatch, client)

    with pytest.raises(openai_engine.TranscriptionError) as excinfo:
        openai_engine.transcribe_file_openai(_write_dummy_chunk(tmp_path), api_key="k")

    assert "chunk.mp3" in str(excinfo.value)
    assert "timed out" in str(excinfo.value)
    assert len(client.audio.transcriptions.calls) == 1


def test_openai_engine_requires_api_key(monkeypatch, tmp_path: Path):
    client = FakeClient([])
    _install_fake_openai(monkeypatch, client)

    with pytest.raises(openai_engine.TranscriptionError):
        openai_engine.transcribe_file_openai(_write_dummy_chunk(tmp_path), api_key="")
    assert client.audio.transcriptions.calls == []
