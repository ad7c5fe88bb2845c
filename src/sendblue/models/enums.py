from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any


class SendStyle(str, Enum):
    """Visual effect applied when an iMessage is delivered."""

    CELEBRATION = "celebration"
    SHOOTING_STAR = "shooting_star"
    FIREWORKS = "fireworks"
    LASERS = "lasers"
    LOVE = "love"
    CONFETTI = "confetti"
    BALLOONS = "balloons"
    SPOTLIGHT = "spotlight"
    ECHO = "echo"
    INVISIBLE = "invisible"
    GENTLE = "gentle"
    LOUD = "loud"
    SLAM = "slam"
    DEFAULT = ""


class Status(str, Enum):
    """
    Lifecycle state of a message as reported by the API.

    Members compare by declaration order (QUEUED < SENT < DELIVERED < READ),
    with FAILED and RECEIVED after them. The ordering is only a convenience;
    state transitions belong to the server.
    """

    QUEUED = "QUEUED"
    SENT = "SENT"
    DELIVERED = "DELIVERED"
    READ = "READ"
    FAILED = "FAILED"
    RECEIVED = "RECEIVED"

    @classmethod
    def _missing_(cls, value: object) -> Status | None:
        if isinstance(value, str):
            token = value.strip().upper()
            # The history endpoint reports failures as ERROR.
            if token == "ERROR":
                return cls.FAILED
            for member in cls:
                if member.value == token:
                    return member
        return None

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)

    @classmethod
    def _rank_of(cls, other: Any) -> int | None:
        # Plain wire tokens compare by lifecycle too, not as strings.
        if isinstance(other, str):
            return cls(other).rank
        return None

    def __lt__(self, other: Any) -> bool:
        rank = self._rank_of(other)
        if rank is None:
            return NotImplemented
        return self.rank < rank

    def __le__(self, other: Any) -> bool:
        rank = self._rank_of(other)
        if rank is None:
            return NotImplemented
        return self.rank <= rank

    def __gt__(self, other: Any) -> bool:
        rank = self._rank_of(other)
        if rank is None:
            return NotImplemented
        return self.rank > rank

    def __ge__(self, other: Any) -> bool:
        rank = self._rank_of(other)
        if rank is None:
            return NotImplemented
        return self.rank >= rank


class ErrorCode(IntEnum):
    VALIDATION_ERROR = 4000
    RATE_LIMIT_EXCEEDED = 4001
    BLACKLISTED_NUMBER = 4002
    INTERNAL_ERROR = 5000
    SERVER_RATE_EXCEEDED = 5003
    MESSAGE_FAILED_TO_SEND = 10001
    FAILED_TO_RESOLVE_MESSAGE_STATUS = 10002
    # Anything the API returns that is not listed above.
    UNKNOWN = -1

    @classmethod
    def _missing_(cls, value: object) -> ErrorCode:
        return cls.UNKNOWN

    @classmethod
    def from_wire(cls, value: Any) -> ErrorCode | None:
        """Accept the code as an int or a numeric string; None and "" mean no error."""
        if value is None or isinstance(value, ErrorCode):
            return value
        if isinstance(value, bool):
            return cls.UNKNOWN
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            try:
                value = int(value)
            except ValueError:
                return cls.UNKNOWN
        return cls(value)


class TypingIndicatorStatus(str, Enum):
    SENT = "SENT"
    ERROR = "ERROR"


class EvaluateServiceType(str, Enum):
    IMESSAGE = "iMessage"
    SMS = "SMS"
