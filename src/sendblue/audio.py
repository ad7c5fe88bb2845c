"""
Voice-note conversion.

iMessage plays audio attachments as voice notes only when they are CAF files.
This module pipes arbitrary audio through ffmpeg and hands back a data: URL
that can be used as a message's media_url. It needs an ffmpeg binary, either
on PATH or configured via SENDBLUE_FFMPEG_PATH; nothing else in the package
imports it.
"""

from __future__ import annotations

import base64
import logging
import shutil
import subprocess

from .config import get_settings
from .errors import AudioIOError, AudioToolFailedError, AudioToolNotFoundError
from .models import DataUrl

logger = logging.getLogger("sendblue.audio")

CAF_MIME_TYPE = "audio/x-caf"
DEFAULT_CODEC = "libopus"


def _resolve_ffmpeg(ffmpeg_path: str | None) -> str:
    candidate = ffmpeg_path or get_settings().ffmpeg_path or "ffmpeg"
    resolved = shutil.which(candidate)
    if resolved is None:
        raise AudioToolNotFoundError(
            f"ffmpeg not found ({candidate!r}); install it or set SENDBLUE_FFMPEG_PATH"
        )
    return resolved


def build_command(ffmpeg: str, source_format: str, codec: str = DEFAULT_CODEC) -> list[str]:
    return [
        ffmpeg,
        "-hide_banner",
        "-loglevel",
        "error",
        "-f",
        source_format,
        "-i",
        "pipe:0",
        "-vn",
        "-c:a",
        codec,
        "-f",
        "caf",
        "pipe:1",
    ]


def convert_to_caf(
    data: bytes,
    source_format: str,
    *,
    ffmpeg_path: str | None = None,
    codec: str = DEFAULT_CODEC,
) -> bytes:
    """Run `data` (encoded as `source_format`, e.g. "mp3" or "wav") through ffmpeg."""
    ffmpeg = _resolve_ffmpeg(ffmpeg_path)
    cmd = build_command(ffmpeg, source_format, codec)
    logger.debug("Converting %d bytes of %s audio to caf", len(data), source_format)

    try:
        proc = subprocess.run(cmd, input=data, capture_output=True, check=False)
    except FileNotFoundError as exc:
        # Binary vanished between which() and exec.
        raise AudioToolNotFoundError(str(exc)) from exc
    except OSError as exc:
        raise AudioIOError(f"could not talk to ffmpeg: {exc}") from exc

    if proc.returncode != 0:
        stderr = proc.stderr.decode("utf-8", errors="replace")
        logger.error("ffmpeg exited with status %s", proc.returncode)
        raise AudioToolFailedError(proc.returncode, stderr)
    if not proc.stdout:
        raise AudioIOError("ffmpeg produced no output")
    return proc.stdout


def convert_to_voice_note(
    data: bytes,
    source_format: str,
    *,
    ffmpeg_path: str | None = None,
    codec: str = DEFAULT_CODEC,
) -> DataUrl:
    caf = convert_to_caf(data, source_format, ffmpeg_path=ffmpeg_path, codec=codec)
    encoded = base64.b64encode(caf).decode("ascii")
    return DataUrl.parse(f"data:{CAF_MIME_TYPE};base64,{encoded}")
