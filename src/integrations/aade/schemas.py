"""Pydantic schemas for the AADE RgWsPublic2 registry lookup."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, model_validator

from src.schemas.afm import ErrorKind, RegistryStatus


class RegistryResult(BaseModel):
    """Normalized registry record — one per query, never mutated."""

    model_config = ConfigDict(frozen=True)

    valid: bool = False
    status: RegistryStatus = RegistryStatus.UNKNOWN
    error_kind: ErrorKind | None = None
    detail: str | None = None

    # error_rec, verbatim
    error_code: str | None = None
    error_descr: str | None = None

    # basic_rec
    name: str | None = None  # onomasia
    afm: str | None = None
    tax_office_code: str | None = None  # doy
    tax_office: str | None = None  # doy_descr
    deactivation_flag: str | None = None
    deactivation_descr: str | None = None
    commercial_title: str | None = None
    legal_status: str | None = None
    is_company_descr: str | None = None
    postal_address: str | None = None
    postal_address_no: str | None = None
    postal_zip_code: str | None = None
    postal_area: str | None = None
    registration_date: date | None = None
    stop_date: date | None = None

    call_seq_id: str | None = None

    @model_validator(mode="after")
    def check_validity_invariant(self) -> RegistryResult:
        """valid=True requires name and afm, and no registry error code."""
        if self.valid and (self.name is None or self.afm is None or self.error_code is not None):
            msg = "valid registry result requires name and afm and no error_code"
            raise ValueError(msg)
        if not self.valid and self.status is not RegistryStatus.UNKNOWN:
            msg = "invalid registry result must have UNKNOWN status"
            raise ValueError(msg)
        return self

    @classmethod
    def failure(cls, kind: ErrorKind, detail: str) -> RegistryResult:
        """Error outcome for failures caught at the adapter boundary."""
        return cls(valid=False, status=RegistryStatus.UNKNOWN, error_kind=kind, detail=detail)


class AfmValidationOutcome(BaseModel):
    """Result of the full check: local checksum, then registry when it passes."""

    afm: str | None = None
    checksum_valid: bool = False
    valid: bool = False
    error: ErrorKind | None = None
    detail: str | None = None
    registry: RegistryResult | None = None
