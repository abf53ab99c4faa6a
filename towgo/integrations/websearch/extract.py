"""Contact details extraction from free text."""

from __future__ import annotations

import re
from typing import List, Optional

# Common US phone number formats: 555-123-4567, (555) 123-4567, +1 555.123.4567
PHONE_PATTERN = re.compile(r"(\+?1[-\s.]?)?\(?([0-9]{3})\)?[-\s.]?([0-9]{3})[-\s.]?([0-9]{4})")

ADDRESS_PATTERN = re.compile(
    r"\d+\s+[A-Za-z0-9\s,]+"
    r"(?:Avenue|Ave|Street|St|Road|Rd|Boulevard|Blvd|Drive|Dr|Lane|Ln|Place|Pl|Court|Ct|Highway|Hwy|Parkway|Pkwy)"
    r"[,.\s]+(?:[A-Za-z\s]+,\s*)?[A-Z]{2}\s+\d{5}(?:-\d{4})?"
)


def extract_phone_numbers(text: str) -> List[str]:
    return [match.group(0) for match in PHONE_PATTERN.finditer(text)]


def extract_addresses(text: str) -> List[str]:
    return [match.group(0) for match in ADDRESS_PATTERN.finditer(text)]


def first_phone(text: str) -> Optional[str]:
    phones = extract_phone_numbers(text)
    return phones[0] if phones else None


def first_address(text: str) -> Optional[str]:
    addresses = extract_addresses(text)
    return addresses[0] if addresses else None
