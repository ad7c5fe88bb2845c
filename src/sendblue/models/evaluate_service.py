from __future__ import annotations

from .base import Record
from .enums import EvaluateServiceType
from .phonenumber import PhoneNumber

EVALUATE_SERVICE_PATH = "/evaluate-service"


class EvaluateService(Record):
    """Asks whether a number can receive iMessage or only SMS."""

    number: PhoneNumber

    def to_query(self) -> dict[str, str]:
        return {"number": str(self.number)}


class EvaluateServiceResponse(Record):
    number: PhoneNumber
    service: EvaluateServiceType

    @property
    def supports_imessage(self) -> bool:
        return self.service is EvaluateServiceType.IMESSAGE
