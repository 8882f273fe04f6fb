from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from utils.config_paths import resolve_config_file

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_TEMPLATE = (
    "You are Thorfinn from Vinland Saga. Answer in short, cold fragments.\n\n"
    "Previous conversation context:\n{history}\n\n"
    "User information:\n{facts}\n\n"
    "Current message: {message}"
)


@dataclass(frozen=True)
class PersonaProfile:
    """Persona prompt, canned replies and the probabilities that drive them."""

    name: str = "Thorfinn"
    prompt_template: str = DEFAULT_PROMPT_TEMPLATE
    instruction_headings: tuple[str, ...] = (
        "CORE THORFINN TRAITS:",
        "AUTHENTIC SPEECH PATTERNS:",
        "EXACT THORFINN PHRASES:",
        "CODING RESPONSES:",
    )
    trailing_markers: tuple[str, ...] = ("Remember:", "IMPORTANT:", "Respond EXACTLY as")
    silence_reply: str = "..."
    grunt_reply: str = "Tch."
    error_reply: str = "Tch."
    priority_keywords: tuple[str, ...] = ("code", "help")
    max_words: int = 15
    ignore_probability: float = 0.10
    silence_probability: float = 0.15
    grunt_probability: float = 0.25
    command_typing_delay: tuple[float, float] = (2.0, 5.0)
    reply_typing_delay: tuple[float, float] = (1.0, 2.5)

    def __post_init__(self) -> None:
        for name in ("ignore_probability", "silence_probability", "grunt_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.grunt_probability < self.silence_probability:
            raise ValueError("grunt_probability is cumulative and must be >= silence_probability")
        for name in ("command_typing_delay", "reply_typing_delay"):
            low, high = getattr(self, name)
            if low < 0 or high < low:
                raise ValueError(f"{name} must be an ordered non-negative range, got {(low, high)}")
        if self.max_words < 1:
            raise ValueError("max_words must be >= 1")

    def mentions_priority_topic(self, text: str) -> bool:
        lowered = (text or "").lower()
        return any(keyword.lower() in lowered for keyword in self.priority_keywords)


def _delay_range(raw: Any, default: tuple[float, float]) -> tuple[float, float]:
    if raw is None:
        return default
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise ValueError(f"Typing delay must be a [min, max] pair, got {raw!r}")
    return float(raw[0]), float(raw[1])


def _string_tuple(raw: Any, default: tuple[str, ...]) -> tuple[str, ...]:
    if raw is None:
        return default
    if isinstance(raw, str):
        return (raw,)
    return tuple(str(item) for item in raw if str(item).strip())


def profile_from_mapping(payload: dict[str, Any]) -> PersonaProfile:
    defaults = PersonaProfile()
    persona = payload.get("persona") or {}
    replies = payload.get("replies") or {}
    behavior = payload.get("behavior") or {}

    return PersonaProfile(
        name=str(persona.get("name", defaults.name)),
        prompt_template=str(persona.get("prompt_template") or defaults.prompt_template).strip(),
        instruction_headings=_string_tuple(persona.get("instruction_headings"), defaults.instruction_headings),
        trailing_markers=_string_tuple(persona.get("trailing_markers"), defaults.trailing_markers),
        silence_reply=str(replies.get("silence", defaults.silence_reply)),
        grunt_reply=str(replies.get("grunt", defaults.grunt_reply)),
        error_reply=str(replies.get("error", defaults.error_reply)),
        priority_keywords=_string_tuple(replies.get("priority_keywords"), defaults.priority_keywords),
        max_words=int(replies.get("max_words", defaults.max_words)),
        ignore_probability=float(behavior.get("ignore_probability", defaults.ignore_probability)),
        silence_probability=float(behavior.get("silence_probability", defaults.silence_probability)),
        grunt_probability=float(behavior.get("grunt_probability", defaults.grunt_probability)),
        command_typing_delay=_delay_range(
            behavior.get("command_typing_delay_seconds"), defaults.command_typing_delay
        ),
        reply_typing_delay=_delay_range(behavior.get("reply_typing_delay_seconds"), defaults.reply_typing_delay),
    )


def load_persona_profile(path: Path) -> PersonaProfile:
    resolved_path = path
    if not resolved_path.exists():
        resolved_path = resolve_config_file(path.name)

    if not resolved_path.exists():
        logger.warning("Persona config '%s' not found; using built-in persona defaults.", path.name)
        return PersonaProfile()

    with resolved_path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, dict):
        raise ValueError(f"Persona config '{resolved_path}' must be a mapping")

    logger.info("Loaded persona '%s' from %s", (payload.get("persona") or {}).get("name", "?"), resolved_path)
    return profile_from_mapping(payload)
