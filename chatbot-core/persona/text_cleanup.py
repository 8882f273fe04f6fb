"""Scrub echoed persona instructions out of generated text and keep replies short."""

from __future__ import annotations

import re

from persona.profile import PersonaProfile

_SHOUTED_LABEL_LINE = re.compile(r"^[A-Z\s]+:.*$", re.MULTILINE)
_BULLET_LINE = re.compile(r"^[•-]\s.*$", re.MULTILINE)
_STAGE_DIRECTION = re.compile(r"\*[^*]+\*")
_BLANK_LINES = re.compile(r"\n\s*\n")


def clean_generated_text(raw: str, profile: PersonaProfile) -> str:
    text = (raw or "").strip()
    # A heading swallows everything after it, including later lines.
    for heading in profile.instruction_headings:
        text = re.sub(re.escape(heading) + r".*$", "", text, flags=re.DOTALL)
    for marker in profile.trailing_markers:
        text = re.sub(re.escape(marker) + r".*$", "", text)
    text = _SHOUTED_LABEL_LINE.sub("", text)
    text = _BULLET_LINE.sub("", text)
    text = _STAGE_DIRECTION.sub("", text)
    text = _BLANK_LINES.sub("\n", text)
    return text.strip()


def shorten_reply(text: str, max_words: int) -> str:
    if len(text.split(" ")) <= max_words:
        return text
    shortened = text.split(". ")[0]
    if not shortened.endswith("."):
        shortened += "."
    return shortened
