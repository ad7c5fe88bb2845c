from __future__ import annotations

from .enums import ErrorCode, EvaluateServiceType, SendStyle, Status, TypingIndicatorStatus
from .evaluate_service import EvaluateService, EvaluateServiceResponse
from .history import GetMessagesParams, GetMessagesResponse, RetrievedMessage
from .message import (
    GroupMessage,
    GroupMessageResponse,
    Message,
    MessageResponse,
    MessageStatusCallback,
)
from .phonenumber import PhoneNumber
from .typing_indicator import TypingIndicator, TypingIndicatorResponse
from .urls import CallbackUrl, DataUrl, MediaUrl, VoiceNoteUrl

__all__ = [
    "CallbackUrl",
    "DataUrl",
    "ErrorCode",
    "EvaluateService",
    "EvaluateServiceResponse",
    "EvaluateServiceType",
    "GetMessagesParams",
    "GetMessagesResponse",
    "GroupMessage",
    "GroupMessageResponse",
    "MediaUrl",
    "Message",
    "MessageResponse",
    "MessageStatusCallback",
    "PhoneNumber",
    "RetrievedMessage",
    "SendStyle",
    "Status",
    "TypingIndicator",
    "TypingIndicatorResponse",
    "TypingIndicatorStatus",
    "VoiceNoteUrl",
]
