from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel

ResponseT_co = TypeVar("ResponseT_co", bound=BaseModel, covariant=True)


@runtime_checkable
class SendableMessage(Protocol[ResponseT_co]):
    """
    Anything the client can POST through its generic send().

    Message and GroupMessage implement this: each names the endpoint it is
    posted to and the model its success body decodes into.
    """

    @classmethod
    def endpoint_path(cls) -> str: ...

    @classmethod
    def response_model(cls) -> type[ResponseT_co]: ...

    def to_wire(self) -> dict[str, Any]: ...
