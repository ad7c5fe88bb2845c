from __future__ import annotations

from .base import Record
from .enums import TypingIndicatorStatus
from .phonenumber import PhoneNumber

SEND_TYPING_INDICATOR_PATH = "/send-typing-indicator"


class TypingIndicator(Record):
    number: PhoneNumber


class TypingIndicatorResponse(Record):
    number: PhoneNumber
    status: TypingIndicatorStatus
    error_message: str | None = None
