from __future__ import annotations

import json

from memory.conversation import ConversationContext
from persona.profile import PersonaProfile


def build_persona_prompt(profile: PersonaProfile, message: str, context: ConversationContext) -> str:
    history = "\n".join(context.messages)
    facts = json.dumps(dict(context.facts), indent=2, ensure_ascii=False)
    return profile.prompt_template.format(history=history, facts=facts, message=message).strip()
