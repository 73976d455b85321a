"""Pydantic schemas for the AFM validation API.

Enums shared by the checksum decoder, the AADE integration and the HTTP layer,
plus the inbound request and the diagnostic response body.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator


class ErrorKind(str, Enum):
    """Distinguishable failure kinds surfaced by the diagnostic endpoint."""

    MISSING_AFM = "MISSING_AFM"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_CHECKSUM = "INVALID_CHECKSUM"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    REGISTRY_ERROR = "REGISTRY_ERROR"
    NOT_FOUND = "NOT_FOUND"


class RegistryStatus(str, Enum):
    """AFM status as reported by the AADE registry."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    UNKNOWN = "UNKNOWN"


class AfmValidationRequest(BaseModel):
    """Inbound body for both validation endpoints."""

    afm: str | None = None
    request_id: str | None = None  # opaque correlation token, echoed back unchanged

    @field_validator("afm", mode="before")
    @classmethod
    def strip_afm(cls, v: Any) -> str | None:
        """Coerce to text and strip surrounding whitespace; blank becomes None.

        Non-string values (numbers, objects) are kept as text so they fail the
        local format check instead of the request schema.
        """
        if v is None:
            return None
        return str(v).strip() or None

    @field_validator("request_id", mode="before")
    @classmethod
    def coerce_request_id(cls, v: Any) -> str | None:
        """Numeric correlation tokens are echoed back as text."""
        if v is None or isinstance(v, str):
            return v
        return str(v)


class AfmValidationResponse(BaseModel):
    """Diagnostic response — registry record plus checksum outcome and error kind."""

    request_id: str | None = None
    checksum_valid: bool = False
    valid: bool = False
    status: RegistryStatus = RegistryStatus.UNKNOWN
    error: ErrorKind | None = None
    detail: str | None = None

    error_code: str | None = None
    error_descr: str | None = None
    name: str | None = None
    afm: str | None = None
    tax_office_code: str | None = None
    tax_office: str | None = None
    deactivation_flag: str | None = None
    deactivation_descr: str | None = None  # compared against the active marker for status

    commercial_title: str | None = None
    legal_status: str | None = None
    is_company_descr: str | None = None
    postal_address: str | None = None
    postal_address_no: str | None = None
    postal_zip_code: str | None = None
    postal_area: str | None = None
    registration_date: date | None = None
    stop_date: date | None = None

    call_seq_id: str | None = None  # registry call sequence, for support requests
