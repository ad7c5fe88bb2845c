from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any, Generic, Self, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError, describe_validation_error
from .models import (
    CallbackUrl,
    EvaluateService,
    GetMessagesParams,
    GroupMessage,
    MediaUrl,
    Message,
    PhoneNumber,
    SendStyle,
)
from .models.message import check_group_targets

ModelT = TypeVar("ModelT", bound=BaseModel)


class _Builder(Generic[ModelT]):
    """
    One-shot assembly of a request record.

    Setters only record values; all validation happens in build(). After
    build() has been called, successfully or not, the builder is spent.
    """

    model: type[ModelT]

    def __init__(self) -> None:
        self._fields: dict[str, Any] = {}
        self._consumed = False

    def _ensure_open(self) -> None:
        if self._consumed:
            raise ValidationError("builder has already been consumed")

    def _set(self, name: str, value: Any) -> Self:
        self._ensure_open()
        self._fields[name] = value
        return self

    def _pre_validate(self) -> None:
        pass

    def build(self) -> ModelT:
        self._ensure_open()
        self._consumed = True
        self._pre_validate()
        try:
            return self.model.model_validate(self._fields)
        except PydanticValidationError as exc:
            raise ValidationError(describe_validation_error(exc)) from exc


class MessageBuilder(_Builder[Message]):
    """
    Builds a Message for a single recipient.

    builder = MessageBuilder("+15551234567").content("Hello!")
    message = builder.build()
    """

    model = Message

    def __init__(self, number: PhoneNumber | str) -> None:
        super().__init__()
        self._fields["number"] = number

    @staticmethod
    def group() -> GroupMessageBuilder:
        return GroupMessageBuilder()

    def content(self, content: str) -> Self:
        return self._set("content", content)

    def media_url(self, media_url: MediaUrl | str) -> Self:
        return self._set("media_url", media_url)

    def status_callback(self, status_callback: CallbackUrl | str) -> Self:
        return self._set("status_callback", status_callback)

    def send_style(self, send_style: SendStyle | str) -> Self:
        return self._set("send_style", send_style)

    def _pre_validate(self) -> None:
        if self._fields.get("number") is None:
            raise ValidationError("number is required")


class GroupMessageBuilder(_Builder[GroupMessage]):
    model = GroupMessage

    def numbers(self, numbers: Iterable[PhoneNumber | str]) -> Self:
        return self._set("numbers", tuple(numbers))

    def group_id(self, group_id: str) -> Self:
        return self._set("group_id", group_id)

    def content(self, content: str) -> Self:
        return self._set("content", content)

    def media_url(self, media_url: MediaUrl | str) -> Self:
        return self._set("media_url", media_url)

    def status_callback(self, status_callback: CallbackUrl | str) -> Self:
        return self._set("status_callback", status_callback)

    def send_style(self, send_style: SendStyle | str) -> Self:
        return self._set("send_style", send_style)

    def _pre_validate(self) -> None:
        check_group_targets(
            self._fields.get("numbers"),
            self._fields.get("group_id"),
            self._fields.get("content"),
            self._fields.get("media_url"),
        )


class GetMessagesParamsBuilder(_Builder[GetMessagesParams]):
    """Every filter is optional; passing None clears it."""

    model = GetMessagesParams

    def cid(self, cid: str | None) -> Self:
        return self._set("cid", cid)

    def number(self, number: PhoneNumber | str | None) -> Self:
        return self._set("number", number)

    def limit(self, limit: int | None) -> Self:
        return self._set("limit", limit)

    def offset(self, offset: int | None) -> Self:
        return self._set("offset", offset)

    def from_date(self, from_date: str | datetime | None) -> Self:
        return self._set("from_date", from_date)


class EvaluateServiceBuilder(_Builder[EvaluateService]):
    model = EvaluateService

    def number(self, number: PhoneNumber | str) -> Self:
        return self._set("number", number)

    def _pre_validate(self) -> None:
        if self._fields.get("number") is None:
            raise ValidationError("number is required")
