"""Exceptions raised by the AADE registry adapter before boundary conversion."""

from __future__ import annotations

from src.schemas.afm import ErrorKind


class RegistryError(Exception):
    """Base class for registry call failures."""

    kind: ErrorKind = ErrorKind.TRANSPORT_ERROR

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class RegistryTransportError(RegistryError):
    """Network failure, timeout, or non-success HTTP status."""

    kind = ErrorKind.TRANSPORT_ERROR


class RegistryParseError(RegistryError):
    """Response body is not a well-formed XML document."""

    kind = ErrorKind.PARSE_ERROR
