from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict

from .enums import ErrorCode, SendStyle, Status
from .phonenumber import PhoneNumber


class Record(BaseModel):
    """Immutable API record. Unknown keys in responses are ignored."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict using API field names, with unset fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _coerce_status(value: Any) -> Any:
    if isinstance(value, str):
        return Status(value)
    return value


def _coerce_timestamp(value: Any) -> Any:
    # Firestore exports timestamps as {"_seconds": ..., "_nanoseconds": ...}
    if isinstance(value, dict):
        seconds = value.get("_seconds", value.get("seconds"))
        nanos = value.get("_nanoseconds", value.get("nanoseconds", 0))
        if isinstance(seconds, int | float) and isinstance(nanos, int | float):
            try:
                moment = datetime.fromtimestamp(seconds, tz=UTC)
                return moment + timedelta(microseconds=nanos // 1000)
            except (OverflowError, OSError, ValueError) as exc:
                # pydantic only reports ValueError as a field error
                raise ValueError(f"timestamp out of range: {value!r}") from exc
    return value


def _coerce_send_style(value: Any) -> Any:
    # The API sends "" or null when no effect was applied.
    if value is None:
        return SendStyle.DEFAULT
    return value


def _empty_as_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


StatusField = Annotated[Status, BeforeValidator(_coerce_status)]
ErrorCodeField = Annotated[ErrorCode | None, BeforeValidator(ErrorCode.from_wire)]
SendStyleField = Annotated[SendStyle, BeforeValidator(_coerce_send_style)]
Timestamp = Annotated[datetime, BeforeValidator(_coerce_timestamp)]
OptionalPhoneNumber = Annotated[PhoneNumber | None, BeforeValidator(_empty_as_none)]
