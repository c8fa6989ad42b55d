"""
Lookup data models for the PIN Checker Service.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, field_validator


class FailureKind(str, Enum):
    """Failure categories surfaced to the caller."""
    AUTHENTICATION_FAILED = "authentication_failed"
    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport_error"
    NOT_FOUND_UPSTREAM = "not_found_upstream"
    UPSTREAM_ERROR = "upstream_error"


@dataclass(frozen=True)
class LookupRequest:
    """Taxpayer identity to verify."""
    taxpayer_id: Optional[str]
    taxpayer_type: Optional[str]

    def downstream_payload(self) -> Dict[str, Any]:
        return {"TaxpayerID": self.taxpayer_id, "TaxpayerType": self.taxpayer_type}


@dataclass(frozen=True)
class Found:
    """Downstream confirmed the taxpayer record."""
    taxpayer_id: str
    pin: str
    taxpayer_name: Optional[str] = None
    pin_status: str = "Active"
    itax_status: str = "Registered"
    extra: Dict[str, Any] = field(default_factory=dict)

    outcome = "found"

    def data(self) -> Dict[str, Any]:
        """Flatten into the payload the front-end renders."""
        mapped = dict(self.extra)
        mapped.update(
            pin=self.pin,
            taxpayer_name=self.taxpayer_name,
            pin_status=self.pin_status,
            itax_status=self.itax_status,
        )
        return mapped


@dataclass(frozen=True)
class NotFound:
    """Downstream answered successfully but holds no matching record."""
    taxpayer_id: str

    outcome = "not_found"


@dataclass(frozen=True)
class Failure:
    """The lookup could not be completed."""
    kind: FailureKind
    message: str
    taxpayer_id: str
    error: str = "API Error"

    @property
    def outcome(self) -> str:
        return self.kind.value


CanonicalResult = Union[Found, NotFound, Failure]


class PinCheckRequest(BaseModel):
    """Inbound request body for a PIN check."""
    taxpayer_id: Optional[str] = Field(None, alias="TaxpayerID", description="National ID or other identifier")
    taxpayer_type: Optional[str] = Field(None, alias="TaxpayerType", description="Identifier type, e.g. KE")

    @field_validator("taxpayer_id", "taxpayer_type", mode="before")
    @classmethod
    def _coerce_numbers(cls, value: Any) -> Any:
        # Front-ends frequently post numeric ID numbers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_lookup_request(self) -> LookupRequest:
        return LookupRequest(taxpayer_id=self.taxpayer_id, taxpayer_type=self.taxpayer_type)
