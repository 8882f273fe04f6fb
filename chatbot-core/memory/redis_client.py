import json
import logging
from collections import OrderedDict
from types import MappingProxyType
from typing import Any

import redis

from memory.conversation import ConversationContext
from memory.facts import extract_user_facts

logger = logging.getLogger(__name__)


class RedisConversationMemory:
    """Rolling history and facts per sender kept in Redis with a TTL.

    The local cache only holds senders written while Redis was failing. It is
    capped at ``max_cached`` entries, and a key leaves it once Redis answers.
    """

    def __init__(
        self,
        host: str,
        port: int,
        password: str,
        history_size: int = 20,
        ttl_seconds: int = 86400,
        key_prefix: str = "chatbot:memory",
        max_cached: int = 1000,
        client: Any = None,
    ) -> None:
        self._client = client or redis.Redis(
            host=host,
            port=port,
            password=password or None,
            decode_responses=True,
        )
        self.history_size = history_size
        self._ttl = ttl_seconds
        self._key_prefix = key_prefix
        self._max_cached = max_cached
        self._fallback_cache: OrderedDict[str, dict[str, Any]] = OrderedDict()

    def _key(self, sender_id: str | int) -> str:
        return f"{self._key_prefix}:{sender_id}"

    @staticmethod
    def _empty() -> dict[str, Any]:
        return {"messages": [], "facts": {}}

    def _cache(self, key: str, value: dict[str, Any]) -> None:
        self._fallback_cache[key] = value
        self._fallback_cache.move_to_end(key)
        while len(self._fallback_cache) > self._max_cached:
            self._fallback_cache.popitem(last=False)

    def _load(self, key: str) -> dict[str, Any]:
        try:
            raw = self._client.get(key)
        except redis.RedisError as exc:
            logger.warning("Redis read failed for %s; using local cache: %s", key, exc)
            cached = self._fallback_cache.get(key)
            if cached is None:
                return self._empty()
            return {"messages": list(cached.get("messages", [])), "facts": dict(cached.get("facts", {}))}

        self._fallback_cache.pop(key, None)
        if not raw:
            return self._empty()
        try:
            value = json.loads(raw)
        except ValueError as exc:
            logger.warning("Discarding unreadable conversation state for %s: %s", key, exc)
            return self._empty()
        if not isinstance(value, dict):
            return self._empty()
        return value

    def _store(self, key: str, value: dict[str, Any]) -> None:
        try:
            self._client.setex(key, self._ttl, json.dumps(value))
        except redis.RedisError as exc:
            logger.warning("Redis write failed for %s; kept in local cache: %s", key, exc)
            self._cache(key, value)
            return
        self._fallback_cache.pop(key, None)

    @staticmethod
    def _to_context(value: dict[str, Any]) -> ConversationContext:
        return ConversationContext(
            messages=tuple(str(item) for item in value.get("messages", [])),
            facts=MappingProxyType({str(k): str(v) for k, v in dict(value.get("facts", {})).items()}),
        )

    def remember(self, sender_id: str | int, text: str) -> ConversationContext:
        key = self._key(sender_id)
        value = self._load(key)
        facts = dict(value.get("facts", {}))
        facts.update(extract_user_facts(text))
        messages = list(value.get("messages", []))
        messages.append(text)
        value = {"messages": messages[-self.history_size :], "facts": facts}
        self._store(key, value)
        return self._to_context(value)

    def get(self, sender_id: str | int) -> ConversationContext:
        return self._to_context(self._load(self._key(sender_id)))

    def forget(self, sender_id: str | int) -> None:
        key = self._key(sender_id)
        self._fallback_cache.pop(key, None)
        try:
            self._client.delete(key)
        except redis.RedisError as exc:
            logger.warning("Redis delete failed for %s: %s", key, exc)
