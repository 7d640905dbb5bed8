import re
from typing import Tuple

from django.conf import settings

_PHONE_RE = re.compile(r"^(\d{1,4})(\d{6,15})$")


def parse_phone_number(full_number: str) -> Tuple[str, str]:
    """
    Split a phone number into ``(country_code, number)``.

    Numbers that do not look like ``<1-4 digit code><6-15 digits>`` are kept
    whole and get the configured default country code.
    """
    cleaned = re.sub(r"[^\d+]", "", full_number or "")
    digits = cleaned.lstrip("+")

    match = _PHONE_RE.match(digits)
    if not match:
        return settings.DEFAULT_PHONE_COUNTRY, digits
    return f"+{match.group(1)}", match.group(2)


def join_phone_number(country: str, number: str) -> str:
    clean_country = re.sub(r"\D", "", country or "")
    clean_number = re.sub(r"\D", "", number or "")
    return f"+{clean_country}{clean_number}"
