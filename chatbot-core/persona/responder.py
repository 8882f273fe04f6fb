from __future__ import annotations

import logging
import random

from memory.conversation import ConversationContext
from persona.client import TextGenerationClient
from persona.profile import PersonaProfile
from persona.prompt import build_persona_prompt
from persona.text_cleanup import clean_generated_text, shorten_reply

logger = logging.getLogger(__name__)


class PersonaResponder:
    """Turn a user message plus its conversation context into an in-character reply."""

    def __init__(
        self,
        client: TextGenerationClient,
        profile: PersonaProfile,
        rng: random.Random | None = None,
    ) -> None:
        self.client = client
        self.profile = profile
        self._rng = rng or random.Random()

    async def generate(self, message: str, context: ConversationContext) -> str | None:
        """Return the reply text, or ``None`` when nothing usable came back."""
        try:
            prompt = build_persona_prompt(self.profile, message, context)
            raw = await self.client.complete(prompt)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Text generation failed: %s", exc)
            return None

        reply = shorten_reply(clean_generated_text(raw, self.profile), self.profile.max_words)

        roll = self._rng.random()
        if not self.profile.mentions_priority_topic(message):
            if roll < self.profile.silence_probability:
                return self.profile.silence_reply
            if roll < self.profile.grunt_probability:
                return self.profile.grunt_reply

        if not reply:
            logger.debug("Generated text was empty after cleanup")
            return None
        return reply
