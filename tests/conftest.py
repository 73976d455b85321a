"""Shared fixtures: RgWsPublic2 response documents and registry settings."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from src.config import RegistrySettings

NS_ENV = "http://www.w3.org/2003/05/soap-envelope"
NS_SERVICE = "http://rgwspublic2/RgWsPublic2Service"
NS_TYPES = "http://rgwspublic2/RgWsPublic2"
NS_XSI = "http://www.w3.org/2001/XMLSchema-instance"

ACTIVE_MARKER = "ΕΝΕΡΓΟΣ ΑΦΜ"


def _field(tag: str, value: str | None, prefix: str = "") -> str:
    if value is None:
        return f'<{prefix}{tag} xsi:nil="true"/>'
    return f"<{prefix}{tag}>{value}</{prefix}{tag}>"


def build_registry_response(
    *,
    shape: str = "qualified",
    afm: str | None = "094014201",
    name: str | None = "ΔΗΜΟΣΙΑ ΕΠΙΧΕΙΡΗΣΗ ΗΛΕΚΤΡΙΣΜΟΥ Α.Ε.",
    deactivation_descr: str | None = ACTIVE_MARKER,
    error_code: str | None = None,
    error_descr: str | None = None,
    basic_rec: bool = True,
    regist_date: str | None = "1999-12-31",
) -> str:
    """Render an rgWsPublic2AfmMethod response.

    Shapes:
        qualified   — production layout, children in the default RgWsPublic2 namespace
        unprefixed  — no namespaces on any element
        output_rec  — OUTPUT_REC container, prefixed basic_rec fields, unqualified error_rec
    """
    field_prefix = "ns3:" if shape == "output_rec" else ""

    error_rec = (
        "<error_rec>"
        + _field("error_code", error_code)
        + _field("error_descr", error_descr)
        + "</error_rec>"
    )

    if basic_rec:
        fields = [
            ("afm", afm),
            ("doy", "1159"),
            ("doy_descr", "ΦΑΕ ΑΘΗΝΩΝ"),
            ("i_ni_flag_descr", "ΜΗ ΦΠ"),
            ("deactivation_flag", "1"),
            ("deactivation_flag_descr", deactivation_descr),
            ("firm_flag_descr", "ΕΠΙΤΗΔΕΥΜΑΤΙΑΣ"),
            ("onomasia", name),
            ("commer_title", None),
            ("legal_status_descr", "ΑΕ"),
            ("postal_address", "ΧΑΛΚΟΚΟΝΔΥΛΗ"),
            ("postal_address_no", "30"),
            ("postal_zip_code", "10432"),
            ("postal_area_description", "ΑΘΗΝΑ"),
            ("regist_date", regist_date),
            ("stop_date", None),
        ]
        basic = "<basic_rec>" + "".join(_field(t, v, field_prefix) for t, v in fields) + "</basic_rec>"
    else:
        basic = '<basic_rec xsi:nil="true"/>'

    record_body = "<call_seq_id>48312207</call_seq_id>" + error_rec + basic

    if shape == "qualified":
        return (
            f'<env:Envelope xmlns:env="{NS_ENV}" xmlns:xsi="{NS_XSI}">'
            "<env:Header/><env:Body>"
            f'<srvc:rgWsPublic2AfmMethodResponse xmlns:srvc="{NS_SERVICE}" xmlns="{NS_TYPES}">'
            f"<srvc:result><rg_ws_public2_result_rtType>{record_body}</rg_ws_public2_result_rtType></srvc:result>"
            "</srvc:rgWsPublic2AfmMethodResponse>"
            "</env:Body></env:Envelope>"
        )
    if shape == "unprefixed":
        return (
            f'<Envelope xmlns:xsi="{NS_XSI}"><Header/><Body>'
            "<rgWsPublic2AfmMethodResponse><result>"
            f"<rg_ws_public2_result_rtType>{record_body}</rg_ws_public2_result_rtType>"
            "</result></rgWsPublic2AfmMethodResponse>"
            "</Body></Envelope>"
        )
    if shape == "output_rec":
        return (
            f'<env:Envelope xmlns:env="{NS_ENV}" xmlns:xsi="{NS_XSI}"><env:Body>'
            f'<ns2:rgWsPublic2AfmMethodResponse xmlns:ns2="{NS_SERVICE}" xmlns:ns3="{NS_TYPES}">'
            f"<OUTPUT_REC>{record_body}</OUTPUT_REC>"
            "</ns2:rgWsPublic2AfmMethodResponse>"
            "</env:Body></env:Envelope>"
        )
    msg = f"unknown shape: {shape}"
    raise ValueError(msg)


SOAP_FAULT = (
    f'<env:Envelope xmlns:env="{NS_ENV}"><env:Body><env:Fault>'
    "<env:Code><env:Value>env:Receiver</env:Value></env:Code>"
    '<env:Reason><env:Text xml:lang="en">Service temporarily unavailable</env:Text></env:Reason>'
    "</env:Fault></env:Body></env:Envelope>"
)


@pytest.fixture()
def registry_response() -> Callable[..., str]:
    """Factory fixture for RgWsPublic2 response documents."""
    return build_registry_response


@pytest.fixture()
def soap_fault() -> str:
    return SOAP_FAULT


@pytest.fixture()
def registry_settings() -> RegistrySettings:
    """Registry settings with injected fake credentials."""
    return RegistrySettings(
        aade_url="https://registry.test/RgWsPublic2",
        aade_username="test-user",
        aade_password="s3cret&<pw>",
        aade_called_by="",
        aade_timeout=2.0,
        aade_active_marker=ACTIVE_MARKER,
    )
