from persona.client import GenerationError, TextGenerationClient
from persona.profile import PersonaProfile, load_persona_profile
from persona.responder import PersonaResponder

__all__ = [
    "GenerationError",
    "PersonaProfile",
    "PersonaResponder",
    "TextGenerationClient",
    "load_persona_profile",
]
