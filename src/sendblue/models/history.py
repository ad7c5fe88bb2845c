from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, Field, NonNegativeInt

from .base import OptionalPhoneNumber, Record, StatusField, Timestamp
from .enums import ErrorCode
from .phonenumber import PhoneNumber

GET_MESSAGES_PATH = "/accounts/messages"

FROM_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class GetMessagesParams(Record):
    """
    Filters for the message history endpoint.

    Pagination is driven by the caller: issue another request with a larger
    offset to get the next page.
    """

    cid: str | None = None
    number: PhoneNumber | None = None
    limit: NonNegativeInt | None = None
    offset: NonNegativeInt | None = None
    from_date: str | datetime | None = None

    def to_query(self) -> dict[str, str]:
        query: dict[str, str] = {}
        if self.cid is not None:
            query["cid"] = self.cid
        if self.number is not None:
            query["number"] = str(self.number)
        if self.limit is not None:
            query["limit"] = str(self.limit)
        if self.offset is not None:
            query["offset"] = str(self.offset)
        if isinstance(self.from_date, datetime):
            query["from_date"] = self.from_date.strftime(FROM_DATE_FORMAT)
        elif self.from_date is not None:
            query["from_date"] = self.from_date
        return query


class RetrievedMessage(Record):
    """A message as returned by the history endpoint."""

    date: str | None = None
    uuid: str | None = None
    allow_sms: bool | None = Field(
        default=None, validation_alias=AliasChoices("allowSMS", "allow_sms")
    )
    send_style: str | None = Field(
        default=None, validation_alias=AliasChoices("sendStyle", "send_style")
    )
    message_type: str | None = Field(
        default=None, validation_alias=AliasChoices("type", "message_type")
    )
    media_url: str | None = None
    content: str | None = None
    number: OptionalPhoneNumber = None
    is_outbound: bool
    account_email: str = Field(validation_alias=AliasChoices("accountEmail", "account_email"))
    was_downgraded: bool | None = None
    callback_url: str | None = Field(
        default=None, validation_alias=AliasChoices("callbackURL", "callback_url")
    )
    row_id: str | None = None
    status: StatusField
    error_message: str | None = None
    to_number: OptionalPhoneNumber = None
    date_sent: Timestamp | None = None
    date_updated: Timestamp | None = None
    error_detail: str | None = None
    phone_id: str | None = Field(default=None, validation_alias=AliasChoices("phoneID", "phone_id"))
    group_id: str | None = None
    from_number: OptionalPhoneNumber = None
    error_code: int | None = None

    @property
    def error(self) -> ErrorCode | None:
        return ErrorCode.from_wire(self.error_code)


class GetMessagesResponse(Record):
    messages: list[RetrievedMessage] = Field(default_factory=list)

