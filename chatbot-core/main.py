import logging
import random
from pathlib import Path

from dotenv import load_dotenv

from chatbot_telegram import ChatbotBot, ChatbotHandlers
from config import AppConfig
from memory import ChatbotSettingsStore, build_conversation_memory
from persona import PersonaResponder, TextGenerationClient, load_persona_profile
from utils.config_paths import resolve_data_file

logger = logging.getLogger("chatbot-main")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # httpx logs every Telegram long-poll request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_bot(config: AppConfig) -> ChatbotBot:
    profile = load_persona_profile(Path(config.persona_file))
    rng = random.Random(config.random_seed)

    settings_path = resolve_data_file(config.settings_path)
    logger.info("Chatbot settings file: %s", settings_path)
    settings_store = ChatbotSettingsStore(settings_path)

    memory = build_conversation_memory(config)
    logger.info("Conversation memory backend: %s", config.memory_backend)

    generation_client = TextGenerationClient(
        api_url=config.generation_api_url,
        timeout_seconds=config.generation_timeout_seconds,
    )
    responder = PersonaResponder(generation_client, profile, rng=rng)
    handlers = ChatbotHandlers(
        settings_store=settings_store,
        memory=memory,
        responder=responder,
        profile=profile,
        owner_user_ids=config.owner_ids,
        rng=rng,
    )
    return ChatbotBot(
        token=config.telegram_bot_token,
        handlers=handlers,
        generation_client=generation_client,
        startup_retry_delay_seconds=config.telegram_startup_retry_delay_seconds,
    )


def main() -> None:
    load_dotenv()
    config = AppConfig()
    configure_logging(config.log_level)
    logger.info("Starting chatbot (%s)...", config.environment)
    build_bot(config).run()


if __name__ == "__main__":
    main()
