from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError as PydanticValidationError


class SendblueError(Exception):
    """Base class for every error raised by this library."""


class ValidationError(SendblueError, ValueError):
    """
    Input was rejected before any network call was made.

    Subclasses ValueError so pydantic reports it as a normal field error
    when a value object is validated inside a model.
    """


class BadRequestError(SendblueError):
    """The API answered 400. The raw body is kept verbatim."""

    status_code = 400

    def __init__(self, body: str) -> None:
        super().__init__(f"Bad request: {body}")
        self.body = body

    def json(self) -> Any:
        return json.loads(self.body)


class UnknownError(SendblueError):
    """Any outcome that is neither a success nor a 400."""

    def __init__(self, body: str, status_code: int | None = None) -> None:
        super().__init__(f"Unknown error ({status_code}): {body}")
        self.body = body
        self.status_code = status_code


class ResponseDecodeError(UnknownError):
    """A success status whose body did not match the expected shape."""

    def __init__(self, body: str, detail: str, status_code: int | None = None) -> None:
        super().__init__(body, status_code)
        self.args = (f"Could not decode response ({status_code}): {detail}",)
        self.detail = detail


class TransportError(UnknownError):
    """The request never produced an HTTP response (connection, TLS, timeout)."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail, None)
        self.args = (f"Request failed: {detail}",)


class AudioConversionError(SendblueError):
    pass


class AudioToolNotFoundError(AudioConversionError):
    pass


class AudioToolFailedError(AudioConversionError):
    def __init__(self, returncode: int, stderr: str) -> None:
        super().__init__(f"ffmpeg exited with status {returncode}: {stderr.strip()}")
        self.returncode = returncode
        self.stderr = stderr


class AudioIOError(AudioConversionError):
    pass


def describe_validation_error(exc: PydanticValidationError) -> str:
    """Flatten pydantic's error list into a single readable line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)
