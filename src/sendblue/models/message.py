from __future__ import annotations

from typing import Annotated, Any

from pydantic import Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError, describe_validation_error
from .base import ErrorCodeField, Record, SendStyleField, StatusField, Timestamp
from .enums import SendStyle
from .phonenumber import PhoneNumber
from .urls import CallbackUrl, MediaUrl

Content = Annotated[str, Field(min_length=1)]

SEND_MESSAGE_PATH = "/send-message"
SEND_GROUP_MESSAGE_PATH = "/send-group-message"


def check_group_targets(
    numbers: Any,
    group_id: str | None,
    content: str | None,
    media_url: Any,
) -> None:
    """
    Cross-field rules for group messages, checked in a fixed order.

    Only the first violated rule is reported.
    """
    if not numbers and not (group_id and group_id.strip()):
        raise ValidationError("Either numbers or group_id must be provided")
    if content is None and media_url is None:
        raise ValidationError("Either content or media_url must be provided")


class Message(Record):
    """A message to a single recipient."""

    number: PhoneNumber
    content: Content | None = None
    media_url: MediaUrl | None = None
    status_callback: CallbackUrl | None = None
    send_style: SendStyle | None = None

    @classmethod
    def endpoint_path(cls) -> str:
        return SEND_MESSAGE_PATH

    @classmethod
    def response_model(cls) -> type[MessageResponse]:
        return MessageResponse


class GroupMessage(Record):
    """
    A message to several recipients, or to an existing group chat.

    Needs numbers or group_id, and content or media_url.
    """

    numbers: tuple[PhoneNumber, ...] | None = None
    group_id: str | None = None
    content: Content | None = None
    media_url: MediaUrl | None = None
    send_style: SendStyle | None = None
    status_callback: CallbackUrl | None = None

    @model_validator(mode="after")
    def check_targets(self) -> GroupMessage:
        check_group_targets(self.numbers, self.group_id, self.content, self.media_url)
        return self

    @classmethod
    def endpoint_path(cls) -> str:
        return SEND_GROUP_MESSAGE_PATH

    @classmethod
    def response_model(cls) -> type[GroupMessageResponse]:
        return GroupMessageResponse


class MessageResponse(Record):
    account_email: str = Field(alias="accountEmail")
    content: str | None = None
    is_outbound: bool
    status: StatusField
    error_code: ErrorCodeField = None
    error_message: str | None = None
    message_handle: str
    date_sent: Timestamp
    date_updated: Timestamp
    from_number: PhoneNumber
    number: PhoneNumber
    to_number: PhoneNumber
    was_downgraded: bool | None = None
    plan: str | None = None
    media_url: str | None = None
    message_type: str | None = None
    group_id: str | None = None
    participants: list[str] | None = None
    send_style: SendStyleField = SendStyle.DEFAULT
    opted_out: bool = False
    error_detail: str | None = None


class GroupMessageResponse(Record):
    account_email: str = Field(alias="accountEmail")
    content: str | None = None
    is_outbound: bool
    status: StatusField
    error_code: ErrorCodeField = None
    error_message: str | None = None
    message_handle: str
    date_sent: Timestamp
    date_updated: Timestamp
    from_number: PhoneNumber
    number: list[PhoneNumber]
    to_number: list[PhoneNumber]
    was_downgraded: bool | None = None
    plan: str | None = None
    media_url: str | None = None
    message_type: str | None = None
    group_id: str


class MessageStatusCallback(Record):
    """
    Body of the delivery-status webhook Sendblue posts to status_callback.

    Only the shape is modeled; receiving the webhook is up to the caller.
    """

    account_email: str = Field(alias="accountEmail")
    content: str | None = None
    is_outbound: bool
    status: StatusField
    error_code: ErrorCodeField = None
    error_message: str | None = None
    message_handle: str
    date_sent: Timestamp
    date_updated: Timestamp
    from_number: PhoneNumber
    number: PhoneNumber
    to_number: PhoneNumber
    was_downgraded: bool | None = None
    plan: str | None = None

    @classmethod
    def from_json(cls, body: str | bytes) -> MessageStatusCallback:
        try:
            return cls.model_validate_json(body)
        except PydanticValidationError as exc:
            raise ValidationError(
                f"invalid status callback payload: {describe_validation_error(exc)}"
            ) from exc
