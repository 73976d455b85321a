"""AFM validation service — orchestrates local checksum + registry lookup."""

from __future__ import annotations

import logging

from src.decoders.afm import compute_check_digit, mask_afm, validate_afm_format
from src.integrations.aade.client import RegistryClient
from src.integrations.aade.schemas import AfmValidationOutcome
from src.schemas.afm import ErrorKind

logger = logging.getLogger(__name__)

_LOCAL_DETAILS: dict[ErrorKind, str] = {
    ErrorKind.INVALID_FORMAT: "AFM must be exactly 9 digits",
    ErrorKind.INVALID_CHECKSUM: "AFM check digit does not match",
}


def check_afm(afm: str) -> ErrorKind | None:
    """Classify an AFM locally.

    Returns:
        ErrorKind.INVALID_FORMAT, ErrorKind.INVALID_CHECKSUM, or None if valid.
    """
    if not validate_afm_format(afm):
        return ErrorKind.INVALID_FORMAT
    if compute_check_digit(afm) != int(afm[8]):
        return ErrorKind.INVALID_CHECKSUM
    return None


async def validate_afm(afm: str | None, client: RegistryClient) -> AfmValidationOutcome:
    """Validate an AFM end to end.

    Steps:
    1. Missing input → MISSING_AFM
    2. Local checksum (no network) → INVALID_FORMAT / INVALID_CHECKSUM
    3. Registry lookup for checksum-valid AFMs only
    4. Outcome error mirrors the registry result's error kind
    """
    if not afm:
        return AfmValidationOutcome(error=ErrorKind.MISSING_AFM, detail="Missing AFM")

    local_error = check_afm(afm)
    if local_error is not None:
        logger.info("AFM %s rejected locally: %s", mask_afm(afm), local_error.value)
        return AfmValidationOutcome(afm=afm, error=local_error, detail=_LOCAL_DETAILS[local_error])

    result = await client.query(afm)
    return AfmValidationOutcome(
        afm=afm,
        checksum_valid=True,
        valid=result.valid,
        error=result.error_kind,
        detail=result.detail,
        registry=result,
    )
