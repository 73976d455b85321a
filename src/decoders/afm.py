"""Greek AFM (Αριθμός Φορολογικού Μητρώου) checksum validator.

Pure Python — no network, no state. An AFM is 9 decimal digits, the last
one being a check digit computed from the first eight:

    sum   = Σ digit[i] * 2^(8 - i)   for i in 0..7
    check = (sum mod 11) mod 10

The validator does not trim: callers strip input before calling.
"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

AFM_LENGTH = 9

_AFM_PATTERN = re.compile(r"[0-9]{9}")

# Weights 2^8 .. 2^1 for the first eight digits
WEIGHTS: tuple[int, ...] = tuple(2 ** (8 - i) for i in range(AFM_LENGTH - 1))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_afm_format(afm: str) -> bool:
    """Check that the AFM is exactly nine ASCII digits."""
    return bool(_AFM_PATTERN.fullmatch(afm))


def compute_check_digit(afm: str) -> int:
    """Compute the expected check digit from the first eight digits."""
    total = sum(int(d) * w for d, w in zip(afm[:8], WEIGHTS))
    return (total % 11) % 10


def validate_afm_checksum(afm: str) -> bool:
    """Validate shape and check digit (position 9) of an AFM.

    Returns False rather than raising on malformed input.
    """
    if not validate_afm_format(afm):
        return False
    return compute_check_digit(afm) == int(afm[8])


def mask_afm(afm: str) -> str:
    """Partial mask for log lines: first four digits kept."""
    return afm[:4] + "X" * max(len(afm) - 4, 0)
