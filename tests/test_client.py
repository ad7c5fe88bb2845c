from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import httpx
import pytest

from sendblue import (
    AsyncSendblueClient,
    BadRequestError,
    ErrorCode,
    EvaluateServiceBuilder,
    EvaluateServiceType,
    GetMessagesParamsBuilder,
    GroupMessageResponse,
    MessageBuilder,
    MessageResponse,
    PhoneNumber,
    ResponseDecodeError,
    SendblueClient,
    SendStyle,
    Status,
    TransportError,
    TypingIndicatorStatus,
    UnknownError,
    ValidationError,
)

BASE_URL = "https://sendblue.test/api"

MESSAGE_RESPONSE = {
    "accountEmail": "YOUR EMAIL",
    "content": "Hello world!",
    "is_outbound": True,
    "status": "QUEUED",
    "error_code": None,
    "error_message": None,
    "message_handle": "dfd747ba-5600-4a8a-804a-a614a0fbc1c5",
    "date_sent": "2023-09-27T16:35:32.287Z",
    "date_updated": "2023-09-27T16:35:32.703Z",
    "from_number": "+16468528190",
    "number": "+19998887777",
    "to_number": "+19998887777",
    "was_downgraded": None,
    "plan": "dedicated",
    "media_url": "https://picsum.photos/200/300.jpg",
    "message_type": "message",
    "group_id": "",
    "participants": [],
    "send_style": "invisible",
    "opted_out": False,
    "error_detail": None,
}

GROUP_MESSAGE_RESPONSE = {
    "accountEmail": "YOUR EMAIL",
    "content": "Hello world",
    "is_outbound": True,
    "status": "QUEUED",
    "error_code": None,
    "error_message": None,
    "message_handle": "073c1408-a6d9-48e2-ae8c-01f06443833",
    "date_sent": "2021-05-19T23:07:23.371Z",
    "date_updated": "2021-05-19T23:07:23.371Z",
    "from_number": "+19998887777",
    "number": ["+11112223333", "+13332221111"],
    "to_number": ["+11112223333", "+13332221111"],
    "was_downgraded": None,
    "plan": "blue",
    "media_url": "https://picsum.photos/200/300.jpg",
    "message_type": "group",
    "group_id": "66e3b90d-4447-43c6-9439-15a69408ac2",
}

HISTORY_RESPONSE = {
    "messages": [
        {
            "error_message": None,
            "date": "2023-09-21T20:22:05.066Z",
            "to_number": "+10722971673",
            "date_sent": {"_seconds": 1695327725, "_nanoseconds": 66000000},
            "date_updated": {"_seconds": 1695327725, "_nanoseconds": 456000000},
            "error_detail": None,
            "phoneID": "worker_5s_spacegray_1",
            "message_type": "message",
            "uuid": "595578e5-6701-4b89-ac9b-28cbfe99cd",
            "media_url": "",
            "content": "test\n - Sent using sendblue.co",
            "send_style": "",
            "callback_url": "",
            "is_outbound": True,
            "allow_sms": False,
            "accountEmail": "youremail@gmail.com",
            "was_downgraded": None,
            "group_id": "",
            "from_number": "+18888888888",
            "error_code": 22,
            "row_id": "4444",
            "status": "ERROR",
        }
    ]
}


class Recorder:
    """Answers every request with a canned response and keeps what it saw."""

    def __init__(self, status_code: int = 200, **response_kwargs: Any) -> None:
        self.status_code = status_code
        self.response_kwargs = response_kwargs
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, **self.response_kwargs)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was made"
        return self.requests[-1]


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> SendblueClient:
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return SendblueClient("test_key", "test_secret", BASE_URL + "/", http_client=http_client)


def _assert_auth_headers(request: httpx.Request) -> None:
    assert request.headers["sb-api-key-id"] == "test_key"
    assert request.headers["sb-api-secret-key"] == "test_secret"


def test_send_message_success() -> None:
    recorder = Recorder(json=MESSAGE_RESPONSE)
    client = _client(recorder)
    message = MessageBuilder("+10722971673").content("Test message").build()

    response = client.send(message)

    assert isinstance(response, MessageResponse)
    assert response.status is Status.QUEUED
    assert response.message_handle == "dfd747ba-5600-4a8a-804a-a614a0fbc1c5"
    assert response.send_style is SendStyle.INVISIBLE
    assert response.from_number == PhoneNumber.parse("+16468528190")
    assert response.date_sent == datetime(2023, 9, 27, 16, 35, 32, 287000, tzinfo=UTC)

    request = recorder.last
    assert request.method == "POST"
    assert str(request.url) == f"{BASE_URL}/send-message"
    _assert_auth_headers(request)
    assert json.loads(request.content) == {"number": "+10722971673", "content": "Test message"}
    assert len(recorder.requests) == 1


def test_send_message_accepts_202() -> None:
    client = _client(Recorder(202, json=MESSAGE_RESPONSE))
    message = MessageBuilder("+10722971673").content("Test message").build()
    assert client.send_message(message).status is Status.QUEUED


def test_send_group_message_success() -> None:
    recorder = Recorder(json=GROUP_MESSAGE_RESPONSE)
    client = _client(recorder)
    group = (
        MessageBuilder.group()
        .numbers(["+10722971673", "+1234567891"])
        .content("Test group message")
        .build()
    )

    response = client.send(group)

    assert isinstance(response, GroupMessageResponse)
    assert response.status is Status.QUEUED
    assert response.message_handle == "073c1408-a6d9-48e2-ae8c-01f06443833"
    assert [str(n) for n in response.number] == ["+11112223333", "+13332221111"]

    request = recorder.last
    assert str(request.url) == f"{BASE_URL}/send-group-message"
    _assert_auth_headers(request)
    body = json.loads(request.content)
    assert body["numbers"] == ["+10722971673", "+1234567891"]
    assert body["content"] == "Test group message"


def test_get_messages_success() -> None:
    recorder = Recorder(json=HISTORY_RESPONSE)
    client = _client(recorder)
    params = GetMessagesParamsBuilder().limit(50).offset(0).number("+10722971673").build()

    response = client.get_messages(params)

    assert len(response.messages) == 1
    message = response.messages[0]
    assert message.status is Status.FAILED
    assert message.phone_id == "worker_5s_spacegray_1"
    assert message.allow_sms is False
    assert message.error_code == 22
    assert message.error is ErrorCode.UNKNOWN
    assert message.from_number == PhoneNumber.parse("+18888888888")
    assert message.date_sent == datetime(2023, 9, 21, 20, 22, 5, 66000, tzinfo=UTC)

    request = recorder.last
    assert request.method == "GET"
    assert request.url.path == "/api/accounts/messages"
    assert dict(request.url.params) == {"number": "+10722971673", "limit": "50", "offset": "0"}
    _assert_auth_headers(request)


def test_get_messages_without_params_sends_no_query() -> None:
    recorder = Recorder(json={"messages": []})
    client = _client(recorder)

    response = client.get_messages()

    assert response.messages == []
    assert recorder.last.url.query == b""


def test_evaluate_service_success() -> None:
    recorder = Recorder(json={"number": "+10722971673", "service": "iMessage"})
    client = _client(recorder)
    evaluate = EvaluateServiceBuilder().number("+10722971673").build()

    response = client.evaluate_service(evaluate)

    assert response.number == PhoneNumber.parse("+10722971673")
    assert response.service is EvaluateServiceType.IMESSAGE
    assert response.supports_imessage
    assert recorder.last.url.path == "/api/evaluate-service"
    assert recorder.last.url.params["number"] == "+10722971673"
    _assert_auth_headers(recorder.last)


def test_evaluate_service_accepts_plain_number() -> None:
    client = _client(Recorder(json={"number": "+10722971673", "service": "SMS"}))
    response = client.evaluate_service("+10722971673")
    assert response.service is EvaluateServiceType.SMS
    assert not response.supports_imessage


def test_send_typing_indicator_success() -> None:
    recorder = Recorder(json={"number": "+10722971673", "status": "SENT"})
    client = _client(recorder)

    response = client.send_typing_indicator(PhoneNumber.parse("+10722971673"))

    assert response.status is TypingIndicatorStatus.SENT
    assert str(recorder.last.url) == f"{BASE_URL}/send-typing-indicator"
    assert json.loads(recorder.last.content) == {"number": "+10722971673"}
    _assert_auth_headers(recorder.last)


def test_bad_request_surfaces_raw_body() -> None:
    body = {"status": "ERROR", "error_message": "Failed to send typing indicator"}
    recorder = Recorder(400, json=body)
    client = _client(recorder)

    with pytest.raises(BadRequestError) as exc_info:
        client.send_typing_indicator("+10722971673")

    assert json.loads(exc_info.value.body) == body
    assert exc_info.value.json() == body
    assert len(recorder.requests) == 1


def test_bad_request_body_is_not_decoded() -> None:
    raw = '{"status":"ERROR","error_message":"x"}0'
    client = _client(Recorder(400, text=raw))
    message = MessageBuilder("+10722971673").content("Test message").build()

    with pytest.raises(BadRequestError) as exc_info:
        client.send(message)

    assert exc_info.value.body == raw


def test_unexpected_status_is_unknown_error() -> None:
    client = _client(Recorder(500, text="upstream exploded"))

    with pytest.raises(UnknownError) as exc_info:
        client.evaluate_service("+10722971673")

    assert exc_info.value.status_code == 500
    assert exc_info.value.body == "upstream exploded"
    assert not isinstance(exc_info.value, ResponseDecodeError)


@pytest.mark.parametrize(
    "body",
    [
        "this is not json",
        "",
        json.dumps({"status": "QUEUED"}),
        json.dumps({**MESSAGE_RESPONSE, "status": "TELEPORTED"}),
        json.dumps({**MESSAGE_RESPONSE, "from_number": "nope"}),
        json.dumps({**MESSAGE_RESPONSE, "date_sent": {"_seconds": 1e20, "_nanoseconds": 0}}),
        json.dumps({**MESSAGE_RESPONSE, "date_sent": {"_seconds": 0, "_nanoseconds": -1e30}}),
        json.dumps({**MESSAGE_RESPONSE, "date_sent": {"_seconds": "soon", "_nanoseconds": 0}}),
        json.dumps({**MESSAGE_RESPONSE, "date_updated": {"_nanoseconds": 5}}),
    ],
)
def test_undecodable_success_body_is_decode_error(body: str) -> None:
    client = _client(Recorder(200, text=body))
    message = MessageBuilder("+10722971673").content("Test message").build()

    with pytest.raises(ResponseDecodeError) as exc_info:
        client.send(message)

    assert exc_info.value.body == body
    assert exc_info.value.status_code == 200
    assert exc_info.value.detail


def test_network_failure_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)

    with pytest.raises(TransportError) as exc_info:
        client.send_typing_indicator("+10722971673")

    assert isinstance(exc_info.value, UnknownError)
    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_invalid_input_fails_before_any_request() -> None:
    recorder = Recorder(json={})
    client = _client(recorder)

    with pytest.raises(ValidationError):
        client.send_typing_indicator("not a number")
    with pytest.raises(ValidationError):
        client.evaluate_service("12345")

    assert recorder.requests == []


def test_client_requires_credentials() -> None:
    with pytest.raises(ValidationError):
        SendblueClient("", "secret")


@pytest.mark.parametrize(
    "base_url",
    ["not a url", "ftp://sendblue.test/api", "https://send blue.test/api", ""],
)
def test_client_rejects_bad_base_url(base_url: str) -> None:
    with pytest.raises(ValidationError, match="base_url"):
        SendblueClient("test_key", "test_secret", base_url)
    with pytest.raises(ValidationError, match="base_url"):
        AsyncSendblueClient("test_key", "test_secret", base_url)


def test_repr_hides_credentials() -> None:
    client = _client(Recorder())
    assert "test_secret" not in repr(client)
    assert "test_key" not in repr(client)


def test_closing_does_not_close_borrowed_http_client() -> None:
    http_client = httpx.Client(transport=httpx.MockTransport(Recorder(json=MESSAGE_RESPONSE)))
    with SendblueClient("k", "s", BASE_URL, http_client=http_client):
        pass
    assert not http_client.is_closed


def test_async_client_send_and_errors() -> None:
    recorder = Recorder(json=MESSAGE_RESPONSE)
    message = MessageBuilder("+10722971673").content("Test message").build()

    async def run() -> MessageResponse:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        async with AsyncSendblueClient(
            "test_key", "test_secret", BASE_URL, http_client=http_client
        ) as client:
            return await client.send(message)

    response = asyncio.run(run())

    assert response.status is Status.QUEUED
    assert str(recorder.last.url) == f"{BASE_URL}/send-message"
    _assert_auth_headers(recorder.last)


def test_async_client_bad_request() -> None:
    async def run() -> None:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(Recorder(400, text="nope")))
        client = AsyncSendblueClient("test_key", "test_secret", BASE_URL, http_client=http_client)
        await client.send_typing_indicator("+10722971673")

    with pytest.raises(BadRequestError) as exc_info:
        asyncio.run(run())
    assert exc_info.value.body == "nope"


def _async_client(handler: Callable[[httpx.Request], httpx.Response]) -> AsyncSendblueClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AsyncSendblueClient("test_key", "test_secret", BASE_URL, http_client=http_client)


def test_async_client_get_messages() -> None:
    recorder = Recorder(json=HISTORY_RESPONSE)
    params = GetMessagesParamsBuilder().limit(10).number("+10722971673").build()

    async def run() -> Any:
        async with _async_client(recorder) as client:
            return await client.get_messages(params)

    response = asyncio.run(run())

    assert response.messages[0].status is Status.FAILED
    assert recorder.last.method == "GET"
    assert recorder.last.url.path == "/api/accounts/messages"
    assert dict(recorder.last.url.params) == {"number": "+10722971673", "limit": "10"}
    _assert_auth_headers(recorder.last)


def test_async_client_evaluate_service() -> None:
    recorder = Recorder(json={"number": "+10722971673", "service": "SMS"})

    async def run() -> Any:
        async with _async_client(recorder) as client:
            return await client.evaluate_service("+10722971673")

    response = asyncio.run(run())

    assert response.service is EvaluateServiceType.SMS
    assert recorder.last.url.path == "/api/evaluate-service"
    assert recorder.last.url.params["number"] == "+10722971673"


def test_async_client_network_failure_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async def run() -> None:
        async with _async_client(handler) as client:
            await client.send_typing_indicator("+10722971673")

    with pytest.raises(TransportError) as exc_info:
        asyncio.run(run())
    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)


def test_async_client_undecodable_body_is_decode_error() -> None:
    body = json.dumps({**MESSAGE_RESPONSE, "date_sent": {"_seconds": 1e20, "_nanoseconds": 0}})
    message = MessageBuilder("+10722971673").content("Test message").build()

    async def run() -> None:
        async with _async_client(Recorder(200, text=body)) as client:
            await client.send(message)

    with pytest.raises(ResponseDecodeError) as exc_info:
        asyncio.run(run())
    assert exc_info.value.body == body
