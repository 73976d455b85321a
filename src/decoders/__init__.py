"""Deterministic data decoders — AFM checksum validation."""

from src.decoders.afm import validate_afm_checksum, validate_afm_format

__all__ = ["validate_afm_checksum", "validate_afm_format"]
