"""Result envelope reported by the enveloped tea API."""

from dataclasses import dataclass, field

from .entities import TeaVariety


@dataclass
class ResultEnvelope:
    """Success flag, message and payload of one tea API call.

    A failed call is reported with ``success=False`` and a message describing
    the failure instead of an exception.
    """

    success: bool
    message: str = ""
    teas: list[TeaVariety] = field(default_factory=list)

    @classmethod
    def ok(cls, teas: list[TeaVariety] | None = None, message: str = "") -> "ResultEnvelope":
        return cls(success=True, message=message, teas=list(teas or []))

    @classmethod
    def failure(cls, message: str) -> "ResultEnvelope":
        return cls(success=False, message=message)
