import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _env_csv(name: str) -> list[str]:
    value = os.getenv(name, "")
    return [item.strip() for item in value.split(",") if item.strip()]


def _env_int_or_none(name: str) -> int | None:
    value = (os.getenv(name) or "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


@dataclass
class AppConfig:
    telegram_bot_token: str | None = os.getenv("TELEGRAM_BOT_TOKEN")
    telegram_owner_user_ids: list[str] = field(default_factory=lambda: _env_csv("CHATBOT_OWNER_IDS"))
    telegram_startup_retry_delay_seconds: int = int(os.getenv("TELEGRAM_STARTUP_RETRY_DELAY_SECONDS", "10"))

    settings_path: str = os.getenv("CHATBOT_SETTINGS_PATH", "data/userGroupData.json")
    persona_file: str = os.getenv("CHATBOT_PERSONA_FILE", "persona.yaml")

    generation_api_url: str = os.getenv("CHATBOT_API_URL", "https://api.dreaded.site/api/chatgpt")
    generation_timeout_seconds: float = float(os.getenv("CHATBOT_API_TIMEOUT_SECONDS", "30"))

    memory_backend: str = os.getenv("CHATBOT_MEMORY_BACKEND", "local").strip().lower()
    memory_history_size: int = int(os.getenv("CHATBOT_MEMORY_HISTORY_SIZE", "20"))
    memory_max_conversations: int = int(os.getenv("CHATBOT_MEMORY_MAX_CONVERSATIONS", "1000"))
    memory_ttl_seconds: int = int(os.getenv("CHATBOT_MEMORY_TTL_SECONDS", "86400"))

    redis_host: str = os.getenv("REDIS_HOST", "redis")
    redis_port: int = int(os.getenv("REDIS_PORT", "6379"))
    redis_password: str = os.getenv("REDIS_PASSWORD", "")

    random_seed: int | None = _env_int_or_none("CHATBOT_RANDOM_SEED")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    environment: str = os.getenv("ENVIRONMENT", "development")

    @property
    def owner_ids(self) -> set[int]:
        return {int(item) for item in self.telegram_owner_user_ids if item.lstrip("-").isdigit()}
