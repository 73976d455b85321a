"""AFM validation endpoints — plain-text boolean and JSON diagnostic views.

Both endpoints share the same pipeline (checksum, then AADE registry). The
plain-text endpoint collapses every failure to "false"; the diagnostic one
reports the error kind and detail.
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from src.config import settings
from src.integrations.aade.client import RegistryClient
from src.integrations.aade.schemas import AfmValidationOutcome, RegistryResult
from src.integrations.aade.service import validate_afm
from src.schemas.afm import AfmValidationRequest, AfmValidationResponse, ErrorKind

logger = logging.getLogger(__name__)

router = APIRouter(tags=["afm"])

# Registry fields copied verbatim into the diagnostic response
_REGISTRY_FIELDS = (set(AfmValidationResponse.model_fields) & set(RegistryResult.model_fields)) - {
    "valid",
    "detail",
}


def get_registry_client() -> RegistryClient:
    """FastAPI dependency — a registry client built from process settings."""
    return RegistryClient(settings.registry, verbose=settings.verbose)


async def _run(body: AfmValidationRequest | None, client: RegistryClient) -> AfmValidationOutcome:
    afm = body.afm if body is not None else None
    try:
        return await validate_afm(afm, client)
    except Exception as exc:
        logger.exception("Unexpected failure while validating AFM")
        return AfmValidationOutcome(
            afm=afm,
            error=ErrorKind.TRANSPORT_ERROR,
            detail=f"Unexpected error: {exc}",
        )


def to_response(outcome: AfmValidationOutcome, request_id: str | None) -> AfmValidationResponse:
    """Flatten an outcome into the diagnostic response body.

    Local rejections carry no registry record; the submitted AFM is echoed instead.
    """
    if outcome.registry is not None:
        registry = outcome.registry.model_dump(include=_REGISTRY_FIELDS)
    else:
        registry = {"afm": outcome.afm}
    return AfmValidationResponse(
        request_id=request_id,
        checksum_valid=outcome.checksum_valid,
        valid=outcome.valid,
        error=outcome.error,
        detail=outcome.detail,
        **registry,
    )


async def _read_plain_body(request: Request) -> AfmValidationRequest | None:
    """Parse the body by hand so JSON and schema errors stay inside the handler.

    Raises:
        ValueError: malformed JSON, or a ValidationError for a non-object body.
    """
    raw = await request.body()
    if not raw.strip():
        return None
    return AfmValidationRequest.model_validate(json.loads(raw))


@router.post("/validate-afm", response_class=PlainTextResponse)
async def validate_afm_plain(
    request: Request,
    client: RegistryClient = Depends(get_registry_client),
) -> PlainTextResponse:
    """Answer "true" or "false" — no error information is exposed."""
    try:
        body = await _read_plain_body(request)
    except (ValueError, ValidationError) as exc:
        logger.info("Unreadable /validate-afm body: %s", type(exc).__name__)
        return PlainTextResponse("false", status_code=400)

    outcome = await _run(body, client)
    status_code = 400 if outcome.error is ErrorKind.MISSING_AFM else 200
    return PlainTextResponse("true" if outcome.valid else "false", status_code=status_code)


@router.post("/validate-afm/details", response_model=AfmValidationResponse)
async def validate_afm_details(
    body: AfmValidationRequest | None = None,
    client: RegistryClient = Depends(get_registry_client),
) -> AfmValidationResponse | JSONResponse:
    """Registry record plus checksum outcome, error kind and echoed request_id."""
    outcome = await _run(body, client)
    response = to_response(outcome, body.request_id if body is not None else None)
    if outcome.error is ErrorKind.MISSING_AFM:
        return JSONResponse(status_code=400, content=response.model_dump(mode="json"))
    return response
