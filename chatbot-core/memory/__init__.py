from config import AppConfig
from memory.conversation import ConversationContext, ConversationMemory
from memory.facts import extract_user_facts
from memory.redis_client import RedisConversationMemory
from memory.settings_store import ChatbotSettingsStore


def build_conversation_memory(config: AppConfig) -> ConversationMemory | RedisConversationMemory:
    if config.memory_backend == "redis":
        return RedisConversationMemory(
            host=config.redis_host,
            port=config.redis_port,
            password=config.redis_password,
            history_size=config.memory_history_size,
            ttl_seconds=config.memory_ttl_seconds,
            max_cached=config.memory_max_conversations,
        )
    if config.memory_backend != "local":
        raise ValueError(f"Unknown memory backend '{config.memory_backend}' (expected 'local' or 'redis')")
    return ConversationMemory(
        history_size=config.memory_history_size,
        max_conversations=config.memory_max_conversations,
    )


__all__ = [
    "ChatbotSettingsStore",
    "ConversationContext",
    "ConversationMemory",
    "RedisConversationMemory",
    "build_conversation_memory",
    "extract_user_facts",
]
