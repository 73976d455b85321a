"""Async httpx client for the AADE RgWsPublic2 AFM registry service."""

from __future__ import annotations

import asyncio
import logging

import httpx

from src.config import RegistrySettings
from src.decoders.afm import mask_afm
from src.integrations.aade.envelope import CONTENT_TYPE, build_envelope, mask_credentials
from src.integrations.aade.exceptions import RegistryError, RegistryParseError, RegistryTransportError
from src.integrations.aade.parser import mask_personal_data, parse_document, parse_fault, parse_response
from src.integrations.aade.schemas import RegistryResult

logger = logging.getLogger(__name__)


class RegistryClient:
    """Thin async wrapper around the RgWsPublic2 ``rgWsPublic2AfmMethod`` call.

    Endpoint: POST {aade_url}, SOAP 1.2
    Auth: WS-Security UsernameToken in the envelope header

    One outbound request per query, no retries. ``fetch`` raises
    RegistryError subclasses; ``query`` converts them into failure results.
    """

    def __init__(self, config: RegistrySettings, *, verbose: bool = False) -> None:
        self._url = config.aade_url
        self._username = config.aade_username
        self._password = config.aade_password
        self._called_by = config.aade_called_by or None
        self._active_marker = config.aade_active_marker
        self._deadline = config.aade_timeout
        self._timeout = httpx.Timeout(config.aade_timeout)
        self._verbose = verbose

    async def query(self, afm: str) -> RegistryResult:
        """Look up a checksum-valid AFM; never raises for registry or transport failures."""
        try:
            return await self.fetch(afm)
        except RegistryError as exc:
            logger.warning("AADE lookup failed for AFM %s: %s (%s)", mask_afm(afm), exc.kind.value, exc.detail)
            return RegistryResult.failure(exc.kind, exc.detail)

    async def fetch(self, afm: str) -> RegistryResult:
        """Send the request and parse the answer.

        Raises:
            RegistryTransportError: timeout, network failure, non-2xx status.
            RegistryParseError: response body is not XML.
        """
        envelope = build_envelope(afm, self._username, self._password, self._called_by)
        if self._verbose:
            logger.debug("AADE request envelope: %s", mask_credentials(envelope, self._password))

        body = await self._post(afm, envelope)
        if self._verbose:
            logger.debug(
                "AADE response for AFM %s: %s",
                mask_afm(afm),
                mask_personal_data(body.decode("utf-8", errors="replace")),
            )

        result = parse_response(body, self._active_marker)
        logger.info(
            "AADE lookup for AFM %s: valid=%s status=%s error_code=%s",
            mask_afm(afm),
            result.valid,
            result.status.value,
            result.error_code,
        )
        return result

    async def _post(self, afm: str, envelope: str) -> bytes:
        try:
            async with asyncio.timeout(self._deadline):
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(
                        self._url,
                        content=envelope.encode("utf-8"),
                        headers={"Content-Type": CONTENT_TYPE},
                    )
                    response.raise_for_status()
                    return response.content

        except (httpx.TimeoutException, TimeoutError) as exc:
            logger.warning("AADE timeout after %ss for AFM %s", self._deadline, mask_afm(afm))
            raise RegistryTransportError(f"Registry call timed out after {self._deadline}s") from exc

        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.warning("AADE HTTP error %s for AFM %s", status_code, mask_afm(afm))
            raise RegistryTransportError(_describe_http_error(status_code, exc.response.content)) from exc

        except httpx.HTTPError as exc:
            logger.warning("AADE transport error for AFM %s: %s", mask_afm(afm), exc)
            raise RegistryTransportError(f"Registry call failed: {exc}") from exc


def _describe_http_error(status_code: int, body: bytes) -> str:
    """Error detail for a non-2xx answer, with the SOAP fault reason when the body has one."""
    detail = f"Registry returned HTTP {status_code}"
    try:
        fault = parse_fault(parse_document(body))
    except RegistryParseError:
        return detail
    if fault is None or not any(fault):
        return detail
    code, reason = fault
    return f"{detail}: {reason or code}"
