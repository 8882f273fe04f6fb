import random
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from persona.profile import PersonaProfile

BOT_ID = 999
BOT_USERNAME = "thorfinn_bot"


class FixedRandom(random.Random):
    """Replays the given ``random()`` draws, then keeps returning 0.99."""

    def __init__(self, *values: float) -> None:
        super().__init__(0)
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0) if self._values else 0.99

    def uniform(self, a: float, b: float) -> float:
        return a


@pytest.fixture
def quiet_profile() -> PersonaProfile:
    return PersonaProfile(
        ignore_probability=0.0,
        silence_probability=0.0,
        grunt_probability=0.0,
        command_typing_delay=(0.0, 0.0),
        reply_typing_delay=(0.0, 0.0),
    )


def make_context(args: list[str] | None = None, member_status: str = "member") -> SimpleNamespace:
    bot = MagicMock()
    bot.id = BOT_ID
    bot.username = BOT_USERNAME
    bot.send_chat_action = AsyncMock()
    bot.get_chat_member = AsyncMock(return_value=SimpleNamespace(status=member_status))
    return SimpleNamespace(bot=bot, args=args or [])


def make_update(
    text: str = "",
    *,
    chat_id: int = -1001,
    chat_type: str = "supergroup",
    user_id: int = 42,
    reply_to_user_id: int | None = None,
    entities: tuple = (),
) -> SimpleNamespace:
    reply_to = None
    if reply_to_user_id is not None:
        reply_to = SimpleNamespace(from_user=SimpleNamespace(id=reply_to_user_id))
    message = SimpleNamespace(
        text=text,
        entities=list(entities),
        reply_to_message=reply_to,
        reply_text=AsyncMock(),
    )
    return SimpleNamespace(
        effective_message=message,
        message=message,
        effective_chat=SimpleNamespace(id=chat_id, type=chat_type),
        effective_user=SimpleNamespace(id=user_id),
    )
