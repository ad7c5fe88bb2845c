from __future__ import annotations

from typing import Any, ClassVar, Self

from pydantic import AnyUrl, GetCoreSchemaHandler, GetJsonSchemaHandler, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

from ..errors import ValidationError

VOICE_NOTE_EXTENSION = ".caf"

_any_url = TypeAdapter(AnyUrl)


class _UrlValue:
    """
    Shared behaviour for URL value objects.

    The parsed form is kept for inspection (scheme, path, ...) but the
    string sent on the wire is always the one the caller supplied.
    """

    __slots__ = ("_raw", "_url")

    kind: ClassVar[str] = "url"

    def __init__(self, raw: str, url: AnyUrl) -> None:
        self._raw = raw
        self._url = url

    @classmethod
    def parse(cls, value: str) -> Self:
        if not isinstance(value, str):
            raise ValidationError(f"{cls.kind} must be a string, got {type(value).__name__}")
        try:
            url = _any_url.validate_python(value)
        except PydanticValidationError as exc:
            raise ValidationError(f"invalid url format for {cls.kind}: {value!r}") from exc
        cls._check(url)
        return cls(value, url)

    @classmethod
    def _check(cls, url: AnyUrl) -> None:
        pass

    @property
    def url(self) -> AnyUrl:
        return self._url

    def as_str(self) -> str:
        return self._raw

    def __str__(self) -> str:
        return self._raw

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._raw!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, _UrlValue):
            return type(self) is type(other) and self._raw == other._raw
        return NotImplemented

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._raw))

    @classmethod
    def _validate(cls, value: Any) -> Self:
        if isinstance(value, cls):
            return value
        if isinstance(value, _UrlValue):
            return cls.parse(value.as_str())
        return cls.parse(value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {"type": "string", "format": "uri"}


class MediaUrl(_UrlValue):
    """URL of an image, video or audio attachment."""

    __slots__ = ()
    kind = "media url"


class CallbackUrl(_UrlValue):
    """Endpoint that receives delivery-status webhooks for a message."""

    __slots__ = ()
    kind = "callback url"


class VoiceNoteUrl(_UrlValue):
    """Audio attachment played as an iMessage voice note; must point at a .caf file."""

    __slots__ = ()
    kind = "voice note url"

    @classmethod
    def _check(cls, url: AnyUrl) -> None:
        if not (url.path or "").endswith(VOICE_NOTE_EXTENSION):
            raise ValidationError(
                f"invalid voice note url format, must end with {VOICE_NOTE_EXTENSION}"
            )


class DataUrl(MediaUrl):
    """Inline media (RFC 2397). Produced by sendblue.audio."""

    __slots__ = ()
    kind = "data url"

    @classmethod
    def _check(cls, url: AnyUrl) -> None:
        if url.scheme != "data":
            raise ValidationError(f"data url must use the data: scheme, got {url.scheme!r}")
