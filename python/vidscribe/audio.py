from __future__ import annotations

import json
import logging
import os
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .models import Interval


logger = logging.getLogger(__name__)

AUDIO_CODEC = "libmp3lame"


class MediaError(RuntimeError):
    pass


def ffmpeg_bin() -> str:
    return os.environ.get("FFMPEG_BIN", "ffmpeg")


def ffprobe_bin() -> str:
    return os.environ.get("FFPROBE_BIN", "ffprobe")


def run(cmd: list[str]) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(cmd, check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    except FileNotFoundError as exc:
        raise MediaError(f"{cmd[0]} not found; install ffmpeg or set FFMPEG_BIN/FFPROBE_BIN") from exc
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or b"").decode("utf-8", errors="replace").strip()
        raise MediaError(f"{Path(cmd[0]).name} failed (exit {exc.returncode}): {stderr}") from exc


def probe_duration_seconds(source: Path) -> float:
    if not source.exists():
        raise MediaError(f"Media file does not exist: {source}")

    cmd = [
        ffprobe_bin(),
        "-v",
        "error",
        "-show_entries",
        "format=duration",
        "-of",
        "json",
        str(source),
    ]
    completed = run(cmd)
    try:
        payload = json.loads(completed.stdout.decode("utf-8"))
        duration = float(payload.get("format", {}).get("duration", 0) or 0)
    except (ValueError, AttributeError) as exc:
        raise MediaError(f"Could not read duration of {source} from ffprobe") from exc
    return max(0.0, duration)


def convert_to_mp3(source: Path, out_path: Path) -> Path:
    if not source.exists():
        raise MediaError(f"Media file does not exist: {source}")

    out_path.parent.mkdir(parents=True, exist_ok=True)
    cmd = [
        ffmpeg_bin(),
        "-y",
        "-i",
        str(source),
        "-vn",
        "-c:a",
        AUDIO_CODEC,
        str(out_path),
    ]
    run(cmd)
    return out_path


def render_chunk(source: Path, out_path: Path, start_sec: float, duration_sec: float) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    cmd = [
        ffmpeg_bin(),
        "-y",
        "-ss",
        f"{start_sec:.3f}",
        "-i",
        str(source),
        "-t",
        f"{duration_sec:.3f}",
        "-vn",
        "-c:a",
        AUDIO_CODEC,
        str(out_path),
    ]
    run(cmd)


def chunk_path_for(audio_path: Path, interval: Interval) -> Path:
    return audio_path.with_name(f"{audio_path.stem}_chunk{interval.idx}.mp3")


@contextmanager
def chunk_file(source: Path, interval: Interval, out_path: Path | None = None) -> Iterator[Path]:
    """Render ``interval`` of ``source`` to its own file and remove it on exit.

    A failed render may leave a partial file behind; only a rendered chunk is
    guaranteed to be cleaned up.
    """
    path = out_path or chunk_path_for(source, interval)
    render_chunk(source, path, interval.start_sec, interval.duration_sec)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)
        logger.debug("Removed chunk file %s", path)
