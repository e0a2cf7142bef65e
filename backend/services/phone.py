"""
Phone number normalization shared by the lookup form and the search endpoint.

The form keeps digits only and caps the value at PHONE_LENGTH. The server is
more lenient: it trims and drops common separators but never truncates, so
an oddly shaped value simply does not match any record. Stored phoneNumber
values are compared as-is, so a record imported with separators (for example
"091-234-5678") can no longer be found; imports are expected to store digits.
"""
import re
from typing import Any, Optional

PHONE_LENGTH = 10

_NON_DIGITS = re.compile(r"\D")
_SEPARATORS = re.compile(r"[\s\-.()]")


def normalize_phone_input(raw: Optional[str]) -> str:
    """Digits only, at most PHONE_LENGTH of them."""
    return _NON_DIGITS.sub("", raw or "")[:PHONE_LENGTH]


def phone_input_error(phone: str) -> Optional[str]:
    """Client-side pre-check. Returns an error message or None when submittable."""
    if not phone.strip():
        return "phone number required"
    if len(phone) != PHONE_LENGTH:
        return f"must be exactly {PHONE_LENGTH} digits"
    return None


def normalize_lookup_phone(value: Any) -> str:
    """Server-side normalization. Returns '' for anything that is not usable text."""
    if not isinstance(value, str):
        return ""
    return _SEPARATORS.sub("", value.strip())


def mask_phone(phone: str) -> str:
    """Keep the last 3 digits for log lines."""
    if len(phone) <= 3:
        return "***"
    return "*" * (len(phone) - 3) + phone[-3:]
