"""SOAP 1.2 request envelope for the RgWsPublic2 AFM method.

The envelope layout and namespace declarations are the service's fixed wire
contract. Credentials travel in a WS-Security UsernameToken header.
"""

from __future__ import annotations

from xml.etree import ElementTree as ET
from xml.sax.saxutils import escape

NS_ENV = "http://www.w3.org/2003/05/soap-envelope"
NS_WSSE = "http://docs.oasis-open.org/wss/2004/01/oasis-200401-wss-wssecurity-secext-1.0.xsd"
NS_SERVICE = "http://rgwspublic2/RgWsPublic2Service"
NS_TYPES = "http://rgwspublic2/RgWsPublic2"
NS_XSI = "http://www.w3.org/2001/XMLSchema-instance"

CONTENT_TYPE = "application/soap+xml; charset=utf-8"

_ENVELOPE_TEMPLATE = f"""<?xml version="1.0" encoding="UTF-8"?>
<env:Envelope
  xmlns:env="{NS_ENV}"
  xmlns:ns1="{NS_WSSE}"
  xmlns:ns2="{NS_SERVICE}"
  xmlns:ns3="{NS_TYPES}">
  <env:Header>
    <ns1:Security>
      <ns1:UsernameToken>
        <ns1:Username>{{username}}</ns1:Username>
        <ns1:Password>{{password}}</ns1:Password>
      </ns1:UsernameToken>
    </ns1:Security>
  </env:Header>
  <env:Body>
    <ns2:rgWsPublic2AfmMethod>
      <ns2:INPUT_REC>
        {{called_by}}
        <ns3:afm_called_for>{{afm}}</ns3:afm_called_for>
      </ns2:INPUT_REC>
    </ns2:rgWsPublic2AfmMethod>
  </env:Body>
</env:Envelope>"""


def build_envelope(afm: str, username: str, password: str, called_by: str | None = None) -> str:
    """Render the request envelope for one AFM lookup.

    All interpolated values are XML-escaped.
    """
    if called_by:
        called_by_el = f"<ns3:afm_called_by>{escape(called_by)}</ns3:afm_called_by>"
    else:
        called_by_el = "<ns3:afm_called_by/>"
    return _ENVELOPE_TEMPLATE.format(
        username=escape(username),
        password=escape(password),
        called_by=called_by_el,
        afm=escape(afm),
    )


def extract_called_for(envelope: str) -> str | None:
    """Read the target AFM back out of a rendered envelope."""
    root = ET.fromstring(envelope.encode("utf-8"))
    return root.findtext(
        f"{{{NS_ENV}}}Body/{{{NS_SERVICE}}}rgWsPublic2AfmMethod"
        f"/{{{NS_SERVICE}}}INPUT_REC/{{{NS_TYPES}}}afm_called_for"
    )


def mask_credentials(envelope: str, password: str) -> str:
    """Replace the password in a rendered envelope for debug logging."""
    if not password:
        return envelope
    return envelope.replace(escape(password), "********")
