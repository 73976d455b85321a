"""RgWsPublic2 response parsing.

The registry is inconsistent about namespaces across deployments: the same
element may arrive namespace-qualified, unqualified, or under a different
prefix. Every lookup therefore goes through an ordered list of candidate
paths (qualified first, then unqualified, then namespace-wildcard) and the
first hit wins. Missing values arrive either as absent elements or as
``xsi:nil="true"`` elements with empty text; both read as None.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from collections.abc import Sequence
from datetime import date
from xml.etree import ElementTree as ET

from src.integrations.aade.envelope import NS_ENV, NS_SERVICE, NS_TYPES
from src.integrations.aade.exceptions import RegistryParseError
from src.integrations.aade.schemas import RegistryResult
from src.schemas.afm import ErrorKind, RegistryStatus

logger = logging.getLogger(__name__)

NAMESPACES: dict[str, str] = {
    "env": NS_ENV,
    "srvc": NS_SERVICE,
    "rg": NS_TYPES,
}

# Candidate locations of the record holding error_rec / basic_rec
RESULT_PATHS: tuple[str, ...] = (
    "env:Body/srvc:rgWsPublic2AfmMethodResponse/srvc:result/rg:rg_ws_public2_result_rtType",
    "Body/rgWsPublic2AfmMethodResponse/result/rg_ws_public2_result_rtType",
    "{*}Body/{*}rgWsPublic2AfmMethodResponse/{*}result/{*}rg_ws_public2_result_rtType",
    "env:Body/srvc:rgWsPublic2AfmMethodResponse/srvc:OUTPUT_REC",
    "Body/rgWsPublic2AfmMethodResponse/OUTPUT_REC",
    "{*}Body/{*}rgWsPublic2AfmMethodResponse/{*}OUTPUT_REC",
)

FAULT_PATHS: tuple[str, ...] = (
    "env:Body/env:Fault",
    "Body/Fault",
    "{*}Body/{*}Fault",
)

_XSI_NIL_VALUES = frozenset({"true", "1"})

# basic_rec fields that identify a natural person; masked in verbose logs
PERSONAL_FIELDS: tuple[str, ...] = (
    "onomasia",
    "commer_title",
    "postal_address",
    "postal_address_no",
    "postal_zip_code",
    "postal_area_description",
)

_PERSONAL_FIELD_RE = re.compile(
    r"(<(?:[\w.-]+:)?(?:" + "|".join(PERSONAL_FIELDS) + r")(?:\s[^>]*?)?(?<!/)>)[^<]*(</)"
)


# ---------------------------------------------------------------------------
# Node helpers
# ---------------------------------------------------------------------------


def field_paths(name: str) -> tuple[str, ...]:
    """Candidate child paths for a record field, in lookup order."""
    return (f"rg:{name}", name, f"{{*}}{name}")


def find_first(node: ET.Element | None, paths: Sequence[str]) -> ET.Element | None:
    """Return the first element matched by any of ``paths``, or None."""
    if node is None:
        return None
    for path in paths:
        found = node.find(path, NAMESPACES)
        if found is not None:
            return found
    return None


def is_nil(node: ET.Element) -> bool:
    """True if the element carries an xsi:nil="true" marker (any prefix)."""
    for key, value in node.attrib.items():
        if key.rsplit("}", 1)[-1] == "nil" and value.strip().lower() in _XSI_NIL_VALUES:
            return True
    return False


def read_text(node: ET.Element | None) -> str | None:
    """Stripped element text; None for absent, nil-flagged, or blank nodes."""
    if node is None or is_nil(node):
        return None
    text = (node.text or "").strip()
    return text or None


def lookup_text(record: ET.Element | None, name: str) -> str | None:
    """Read a named child field of ``record`` through the namespace fallbacks."""
    return read_text(find_first(record, field_paths(name)))


def _parse_date(raw: str | None) -> date | None:
    if not raw:
        return None
    try:
        # Registry returns xs:date, sometimes with a timezone suffix
        return date.fromisoformat(raw[:10])
    except ValueError:
        logger.debug("Could not parse registry date: %s", raw)
        return None


def mask_personal_data(body: str) -> str:
    """Replace taxpayer name and postal fields with *** for debug logging."""
    return _PERSONAL_FIELD_RE.sub(r"\1***\2", body)


def normalize_marker(text: str) -> str:
    """NFC, collapsed whitespace, case-folded — for status marker comparison."""
    return " ".join(unicodedata.normalize("NFC", text).split()).casefold()


def is_active(deactivation_descr: str | None, active_marker: str) -> bool:
    """Compare the deactivation-flag description against the active marker.

    Only case and whitespace differences are tolerated; other phrasings
    read as inactive.
    """
    if deactivation_descr is None:
        return False
    return normalize_marker(deactivation_descr) == normalize_marker(active_marker)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_document(body: str | bytes) -> ET.Element:
    """Parse the raw response body, raising RegistryParseError if malformed."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    try:
        return ET.fromstring(body)
    except ET.ParseError as exc:
        raise RegistryParseError(f"Malformed registry response: {exc}") from exc


def parse_fault(root: ET.Element) -> tuple[str | None, str | None] | None:
    """Extract (code, reason) from a SOAP 1.2 or 1.1 fault, if present."""
    fault = find_first(root, FAULT_PATHS)
    if fault is None:
        return None
    code = read_text(find_first(fault, ("env:Code/env:Value", "Code/Value", "{*}Code/{*}Value", "faultcode")))
    reason = read_text(find_first(fault, ("env:Reason/env:Text", "Reason/Text", "{*}Reason/{*}Text", "faultstring")))
    return code, reason


def parse_response(body: str | bytes, active_marker: str) -> RegistryResult:
    """Turn an RgWsPublic2 response document into a RegistryResult.

    Unexpected shapes (no result record, no basic_rec) produce a not-valid
    result rather than an exception. Only a body that is not XML at all
    raises RegistryParseError.
    """
    root = parse_document(body)

    fault = parse_fault(root)
    if fault is not None:
        code, reason = fault
        return RegistryResult(
            error_kind=ErrorKind.REGISTRY_ERROR,
            detail=reason or code or "SOAP fault",
            error_code=code or "SOAP_FAULT",
            error_descr=reason,
        )

    record = find_first(root, RESULT_PATHS)
    if record is None:
        logger.warning("Registry response has no result record (root=%s)", root.tag)
        return RegistryResult(
            error_kind=ErrorKind.NOT_FOUND,
            detail="Registry response has no result record",
        )

    error_rec = find_first(record, field_paths("error_rec"))
    basic_rec = find_first(record, field_paths("basic_rec"))

    error_code = lookup_text(error_rec, "error_code")
    error_descr = lookup_text(error_rec, "error_descr")
    name = lookup_text(basic_rec, "onomasia")
    afm = lookup_text(basic_rec, "afm")
    deactivation_descr = lookup_text(basic_rec, "deactivation_flag_descr")

    valid = error_code is None and name is not None and afm is not None

    if valid:
        status = RegistryStatus.ACTIVE if is_active(deactivation_descr, active_marker) else RegistryStatus.INACTIVE
        error_kind = None
        detail = None
    else:
        status = RegistryStatus.UNKNOWN
        if error_code is not None:
            error_kind = ErrorKind.REGISTRY_ERROR
            detail = error_descr or error_code
        else:
            error_kind = ErrorKind.NOT_FOUND
            detail = error_descr or "Registry returned no taxpayer record"

    return RegistryResult(
        valid=valid,
        status=status,
        error_kind=error_kind,
        detail=detail,
        error_code=error_code,
        error_descr=error_descr,
        name=name,
        afm=afm,
        tax_office_code=lookup_text(basic_rec, "doy"),
        tax_office=lookup_text(basic_rec, "doy_descr"),
        deactivation_flag=lookup_text(basic_rec, "deactivation_flag"),
        deactivation_descr=deactivation_descr,
        commercial_title=lookup_text(basic_rec, "commer_title"),
        legal_status=lookup_text(basic_rec, "legal_status_descr"),
        is_company_descr=lookup_text(basic_rec, "firm_flag_descr"),
        postal_address=lookup_text(basic_rec, "postal_address"),
        postal_address_no=lookup_text(basic_rec, "postal_address_no"),
        postal_zip_code=lookup_text(basic_rec, "postal_zip_code"),
        postal_area=lookup_text(basic_rec, "postal_area_description"),
        registration_date=_parse_date(lookup_text(basic_rec, "regist_date")),
        stop_date=_parse_date(lookup_text(basic_rec, "stop_date")),
        call_seq_id=lookup_text(record, "call_seq_id"),
    )
