from __future__ import annotations

from .builders import (
    EvaluateServiceBuilder,
    GetMessagesParamsBuilder,
    GroupMessageBuilder,
    MessageBuilder,
)
from .client import AsyncSendblueClient, SendblueClient
from .config import DEFAULT_BASE_URL, Settings, get_settings
from .errors import (
    BadRequestError,
    ResponseDecodeError,
    SendblueError,
    TransportError,
    UnknownError,
    ValidationError,
)
from .models import (
    CallbackUrl,
    DataUrl,
    ErrorCode,
    EvaluateService,
    EvaluateServiceResponse,
    EvaluateServiceType,
    GetMessagesParams,
    GetMessagesResponse,
    GroupMessage,
    GroupMessageResponse,
    MediaUrl,
    Message,
    MessageResponse,
    MessageStatusCallback,
    PhoneNumber,
    RetrievedMessage,
    SendStyle,
    Status,
    TypingIndicator,
    TypingIndicatorResponse,
    TypingIndicatorStatus,
    VoiceNoteUrl,
)
from .sendable import SendableMessage

__version__ = "0.1.0"

__all__ = [
    "AsyncSendblueClient",
    "BadRequestError",
    "CallbackUrl",
    "DEFAULT_BASE_URL",
    "DataUrl",
    "ErrorCode",
    "EvaluateService",
    "EvaluateServiceBuilder",
    "EvaluateServiceResponse",
    "EvaluateServiceType",
    "GetMessagesParams",
    "GetMessagesParamsBuilder",
    "GetMessagesResponse",
    "GroupMessage",
    "GroupMessageBuilder",
    "GroupMessageResponse",
    "MediaUrl",
    "Message",
    "MessageBuilder",
    "MessageResponse",
    "MessageStatusCallback",
    "PhoneNumber",
    "ResponseDecodeError",
    "RetrievedMessage",
    "SendStyle",
    "SendableMessage",
    "SendblueClient",
    "SendblueError",
    "Settings",
    "Status",
    "TransportError",
    "TypingIndicator",
    "TypingIndicatorResponse",
    "TypingIndicatorStatus",
    "UnknownError",
    "ValidationError",
    "VoiceNoteUrl",
    "get_settings",
]
