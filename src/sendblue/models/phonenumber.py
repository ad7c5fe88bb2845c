from __future__ import annotations

import re
from typing import Any

import phonenumbers
from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

from ..errors import ValidationError

E164_RE = re.compile(r"^\+[1-9]\d{1,14}$")


class PhoneNumber:
    """
    An internationally parsed phone number.

    Always rendered in E.164 form ("+" + country code + subscriber number),
    both by str() and when serialized inside a model. Equality and hashing
    use that canonical form, so "+1 (555) 123-4567" == "+15551234567".
    """

    __slots__ = ("_number", "_e164")

    def __init__(self, number: phonenumbers.PhoneNumber) -> None:
        e164 = phonenumbers.format_number(number, phonenumbers.PhoneNumberFormat.E164)
        if not E164_RE.match(e164):
            raise ValidationError(f"phone number does not fit E.164: {e164!r}")
        self._number = number
        self._e164 = e164

    @classmethod
    def parse(cls, value: str) -> PhoneNumber:
        if not isinstance(value, str):
            raise ValidationError(f"phone number must be a string, got {type(value).__name__}")
        text = value.strip()
        if not text:
            raise ValidationError("phone number is empty")
        try:
            # No default region: the number must carry its own country code.
            number = phonenumbers.parse(text, None)
        except phonenumbers.NumberParseException as exc:
            raise ValidationError(f"invalid phone number {value!r}: {exc}") from exc
        return cls(number)

    @property
    def e164(self) -> str:
        return self._e164

    @property
    def country_code(self) -> int:
        return self._number.country_code

    @property
    def national_number(self) -> int:
        return self._number.national_number

    def __str__(self) -> str:
        return self._e164

    def __repr__(self) -> str:
        return f"PhoneNumber({self._e164!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PhoneNumber):
            return self._e164 == other._e164
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._e164)

    # --- pydantic integration ---

    @classmethod
    def _validate(cls, value: Any) -> PhoneNumber:
        if isinstance(value, PhoneNumber):
            return value
        if isinstance(value, phonenumbers.PhoneNumber):
            return cls(value)
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
        return {"type": "string", "format": "phone", "examples": ["+15551234567"]}
