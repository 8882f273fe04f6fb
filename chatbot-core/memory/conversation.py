from __future__ import annotations

from collections import OrderedDict, deque
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from memory.facts import extract_user_facts


@dataclass(frozen=True)
class ConversationContext:
    messages: tuple[str, ...] = ()
    facts: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


@dataclass
class _SenderState:
    messages: deque[str]
    facts: dict[str, str] = field(default_factory=dict)

    def snapshot(self) -> ConversationContext:
        return ConversationContext(messages=tuple(self.messages), facts=MappingProxyType(dict(self.facts)))


class ConversationMemory:
    """In-process rolling history and extracted facts per sender.

    Senders are kept in least-recently-used order; once more than
    ``max_conversations`` senders are tracked the stalest one is dropped.
    """

    def __init__(self, history_size: int = 20, max_conversations: int = 1000) -> None:
        if history_size < 1:
            raise ValueError("history_size must be >= 1")
        if max_conversations < 1:
            raise ValueError("max_conversations must be >= 1")
        self.history_size = history_size
        self.max_conversations = max_conversations
        self._states: OrderedDict[str, _SenderState] = OrderedDict()

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, sender_id: object) -> bool:
        return str(sender_id) in self._states

    def _state_for(self, sender_id: str) -> _SenderState:
        state = self._states.get(sender_id)
        if state is None:
            state = _SenderState(messages=deque(maxlen=self.history_size))
            self._states[sender_id] = state
            while len(self._states) > self.max_conversations:
                self._states.popitem(last=False)
        else:
            self._states.move_to_end(sender_id)
        return state

    def remember(self, sender_id: str | int, text: str) -> ConversationContext:
        state = self._state_for(str(sender_id))
        state.facts.update(extract_user_facts(text))
        state.messages.append(text)
        return state.snapshot()

    def get(self, sender_id: str | int) -> ConversationContext:
        state = self._states.get(str(sender_id))
        if state is None:
            return ConversationContext()
        return state.snapshot()

    def forget(self, sender_id: str | int) -> None:
        self._states.pop(str(sender_id), None)
