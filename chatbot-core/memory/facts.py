from __future__ import annotations

import re

_NAME_PATTERN = re.compile(r"my name is\s+(\S+)", re.IGNORECASE)
_AGE_PATTERN = re.compile(r"\d+")
_LOCATION_PATTERN = re.compile(r"(?:i live in|i am from)\s*([^.,!?]*)", re.IGNORECASE)


def extract_user_facts(text: str) -> dict[str, str]:
    """Best-effort extraction of name, age and location from a single message.

    Only fields found in ``text`` are returned so callers can merge the result
    over previously known facts.
    """
    facts: dict[str, str] = {}
    lowered = (text or "").lower()

    name_match = _NAME_PATTERN.search(text or "")
    if name_match:
        name = name_match.group(1).strip(".,!?;:\"'")
        if name:
            facts["name"] = name

    if "i am" in lowered and "years old" in lowered:
        age_match = _AGE_PATTERN.search(text)
        if age_match:
            facts["age"] = age_match.group(0)

    location_match = _LOCATION_PATTERN.search(text or "")
    if location_match:
        location = location_match.group(1).strip()
        if location:
            facts["location"] = location

    return facts
