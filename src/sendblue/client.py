from __future__ import annotations

import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .config import DEFAULT_BASE_URL, Settings, get_settings
from .errors import (
    BadRequestError,
    ResponseDecodeError,
    TransportError,
    UnknownError,
    ValidationError,
    describe_validation_error,
)
from .models import (
    EvaluateService,
    EvaluateServiceResponse,
    GetMessagesParams,
    GetMessagesResponse,
    GroupMessage,
    GroupMessageResponse,
    Message,
    MessageResponse,
    PhoneNumber,
    TypingIndicator,
    TypingIndicatorResponse,
)
from .models.evaluate_service import EVALUATE_SERVICE_PATH
from .models.history import GET_MESSAGES_PATH
from .models.typing_indicator import SEND_TYPING_INDICATOR_PATH
from .sendable import SendableMessage

logger = logging.getLogger("sendblue.client")

API_KEY_HEADER = "sb-api-key-id"
API_SECRET_HEADER = "sb-api-secret-key"

SUCCESS_STATUSES = frozenset({200, 202})

ModelT = TypeVar("ModelT", bound=BaseModel)
RequestT = TypeVar("RequestT", bound=BaseModel)

_http_url = TypeAdapter(HttpUrl)


@dataclass(frozen=True)
class _Call(Generic[ModelT]):
    method: str
    path: str
    response_model: type[ModelT]
    json: dict[str, Any] | None = None
    params: dict[str, str] | None = None


def _build(model: type[RequestT], **fields: Any) -> RequestT:
    try:
        return model.model_validate(fields)
    except PydanticValidationError as exc:
        raise ValidationError(describe_validation_error(exc)) from exc


def _check_base_url(base_url: str) -> str:
    if not isinstance(base_url, str):
        raise ValidationError(f"base_url must be a string, got {type(base_url).__name__}")
    try:
        _http_url.validate_python(base_url)
        httpx.URL(base_url)
    except (PydanticValidationError, httpx.InvalidURL) as exc:
        raise ValidationError(f"invalid base_url: {base_url!r}") from exc
    return base_url.rstrip("/")


class _BaseClient:
    """
    Request building and response classification shared by both clients.

    Holds only credentials and the base URL; nothing changes between calls.
    """

    def __init__(self, api_key: str, api_secret: str, base_url: str = DEFAULT_BASE_URL) -> None:
        if not api_key or not api_secret:
            raise ValidationError("api_key and api_secret are required")
        self.api_key = api_key
        self.api_secret = api_secret
        self.base_url = _check_base_url(base_url)

    def __repr__(self) -> str:
        # Never show credentials.
        return f"{type(self).__name__}(base_url={self.base_url!r})"

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _headers(self) -> dict[str, str]:
        return {API_KEY_HEADER: self.api_key, API_SECRET_HEADER: self.api_secret}

    # --- one _Call per remote operation ---

    def _send_call(self, message: SendableMessage[ModelT]) -> _Call[ModelT]:
        return _Call(
            "POST", message.endpoint_path(), message.response_model(), json=message.to_wire()
        )

    def _get_messages_call(self, params: GetMessagesParams | None) -> _Call[GetMessagesResponse]:
        query = (params or GetMessagesParams()).to_query()
        return _Call("GET", GET_MESSAGES_PATH, GetMessagesResponse, params=query)

    def _evaluate_service_call(
        self, evaluate_service: EvaluateService | PhoneNumber | str
    ) -> _Call[EvaluateServiceResponse]:
        if not isinstance(evaluate_service, EvaluateService):
            evaluate_service = _build(EvaluateService, number=evaluate_service)
        return _Call(
            "GET",
            EVALUATE_SERVICE_PATH,
            EvaluateServiceResponse,
            params=evaluate_service.to_query(),
        )

    def _typing_indicator_call(self, number: PhoneNumber | str) -> _Call[TypingIndicatorResponse]:
        indicator = _build(TypingIndicator, number=number)
        return _Call(
            "POST", SEND_TYPING_INDICATOR_PATH, TypingIndicatorResponse, json=indicator.to_wire()
        )

    # --- transport plumbing ---

    def _request_kwargs(self, call: _Call[Any]) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"headers": self._headers()}
        if call.json is not None:
            kwargs["json"] = call.json
        if call.params:
            kwargs["params"] = call.params
        return kwargs

    def _transport_failure(self, call: _Call[Any], exc: httpx.HTTPError) -> TransportError:
        logger.error("Sendblue request %s %s failed: %s", call.method, call.path, exc)
        return TransportError(str(exc) or type(exc).__name__)

    def _handle_response(self, call: _Call[ModelT], response: httpx.Response) -> ModelT:
        status = response.status_code
        body = response.text

        if status in SUCCESS_STATUSES:
            try:
                return call.response_model.model_validate_json(response.content)
            except PydanticValidationError as exc:
                detail = describe_validation_error(exc)
                logger.error(
                    "Sendblue %s %s returned %s with an undecodable body: %s",
                    call.method,
                    call.path,
                    status,
                    detail,
                )
                raise ResponseDecodeError(body, detail, status) from exc

        if status == 400:
            logger.warning("Sendblue rejected %s %s (400)", call.method, call.path)
            raise BadRequestError(body)

        logger.error("Sendblue %s %s returned unexpected status %s", call.method, call.path, status)
        raise UnknownError(body, status)


class SendblueClient(_BaseClient):
    """
    Blocking Sendblue client.

    Every operation performs exactly one HTTP round trip and either returns
    the decoded record or raises a SendblueError subclass. There are no
    retries.

        client = SendblueClient("key", "secret")
        message = MessageBuilder("+15551234567").content("Hello!").build()
        response = client.send(message)
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        super().__init__(api_key, api_secret, base_url)
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.Client()

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, *, http_client: httpx.Client | None = None
    ) -> SendblueClient:
        settings = settings or get_settings()
        if not settings.api_key or not settings.api_secret:
            raise RuntimeError(
                "Sendblue credentials are not configured (SENDBLUE_API_KEY / SENDBLUE_API_SECRET)"
            )
        return cls(
            settings.api_key, settings.api_secret, settings.base_url, http_client=http_client
        )

    def _execute(self, call: _Call[ModelT]) -> ModelT:
        logger.debug("Sendblue request %s %s", call.method, call.path)
        try:
            response = self._client.request(
                call.method, self._url(call.path), **self._request_kwargs(call)
            )
        except httpx.HTTPError as exc:
            raise self._transport_failure(call, exc) from exc
        return self._handle_response(call, response)

    def send(self, message: SendableMessage[ModelT]) -> ModelT:
        """Send a Message or GroupMessage; the return type follows the message type."""
        return self._execute(self._send_call(message))

    def send_message(self, message: Message) -> MessageResponse:
        return self.send(message)

    def send_group_message(self, message: GroupMessage) -> GroupMessageResponse:
        return self.send(message)

    def get_messages(self, params: GetMessagesParams | None = None) -> GetMessagesResponse:
        """Fetch one page of message history. Page through it by raising offset."""
        return self._execute(self._get_messages_call(params))

    def evaluate_service(
        self, evaluate_service: EvaluateService | PhoneNumber | str
    ) -> EvaluateServiceResponse:
        """Ask whether a number is reachable over iMessage or only SMS."""
        return self._execute(self._evaluate_service_call(evaluate_service))

    def send_typing_indicator(self, number: PhoneNumber | str) -> TypingIndicatorResponse:
        return self._execute(self._typing_indicator_call(number))

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> SendblueClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class AsyncSendblueClient(_BaseClient):
    """Same operations as SendblueClient, as coroutines over httpx.AsyncClient."""

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, api_secret, base_url)
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.AsyncClient()

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, *, http_client: httpx.AsyncClient | None = None
    ) -> AsyncSendblueClient:
        settings = settings or get_settings()
        if not settings.api_key or not settings.api_secret:
            raise RuntimeError(
                "Sendblue credentials are not configured (SENDBLUE_API_KEY / SENDBLUE_API_SECRET)"
            )
        return cls(
            settings.api_key, settings.api_secret, settings.base_url, http_client=http_client
        )

    async def _execute(self, call: _Call[ModelT]) -> ModelT:
        logger.debug("Sendblue request %s %s", call.method, call.path)
        try:
            response = await self._client.request(
                call.method, self._url(call.path), **self._request_kwargs(call)
            )
        except httpx.HTTPError as exc:
            raise self._transport_failure(call, exc) from exc
        return self._handle_response(call, response)

    async def send(self, message: SendableMessage[ModelT]) -> ModelT:
        return await self._execute(self._send_call(message))

    async def send_message(self, message: Message) -> MessageResponse:
        return await self.send(message)

    async def send_group_message(self, message: GroupMessage) -> GroupMessageResponse:
        return await self.send(message)

    async def get_messages(self, params: GetMessagesParams | None = None) -> GetMessagesResponse:
        return await self._execute(self._get_messages_call(params))

    async def evaluate_service(
        self, evaluate_service: EvaluateService | PhoneNumber | str
    ) -> EvaluateServiceResponse:
        return await self._execute(self._evaluate_service_call(evaluate_service))

    async def send_typing_indicator(self, number: PhoneNumber | str) -> TypingIndicatorResponse:
        return await self._execute(self._typing_indicator_call(number))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncSendblueClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
