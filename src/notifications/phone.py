from __future__ import annotations

import re
from typing import Optional

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(raw: Optional[str], country_code: str = "972") -> Optional[str]:
    """Normalize a phone number to ``+<country><subscriber>``.

    - "050-123-4567"   -> "+972501234567"  (national trunk 0 replaced)
    - "+972501234567"  -> "+972501234567"
    - "00972501234567" -> "+972501234567"
    - "+15551234567"   -> "+15551234567"   (explicit + keeps its own country)
    - "501234567"      -> "+972501234567"  (bare subscriber number)

    Returns None when there are no digits at all.
    """
    if not raw:
        return None

    stripped = raw.strip()
    digits = _NON_DIGITS.sub("", stripped)
    if not digits:
        return None

    if stripped.startswith("+"):
        return f"+{digits}"
    if digits.startswith("00"):
        return f"+{digits[2:]}"
    if digits.startswith(country_code):
        return f"+{digits}"
    if digits.startswith("0"):
        digits = digits[1:]
    return f"+{country_code}{digits}"
