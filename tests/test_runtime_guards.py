from pathlib import Path


def test_telegram_run_polling_disables_thread_signal_handlers() -> None:
    source = Path("chatbot-core/chatbot_telegram/bot.py").read_text()
    assert "stop_signals=None" in source


def test_telegram_run_polling_retries_on_network_timeouts() -> None:
    source = Path("chatbot-core/chatbot_telegram/bot.py").read_text()
    assert "except (TimedOut, NetworkError)" in source
    assert "_is_shutdown_network_error" in source
    assert "TELEGRAM_STARTUP_RETRY_DELAY_SECONDS" in Path(".env.example").read_text()


def test_chatbot_command_and_text_handler_are_registered() -> None:
    source = Path("chatbot-core/chatbot_telegram/bot.py").read_text()
    assert 'CommandHandler("chatbot", self.handlers.chatbot_command)' in source
    assert "filters.TEXT & ~filters.COMMAND" in source
    assert "post_shutdown(self._on_shutdown)" in source


def test_generation_is_single_attempt_without_retry_helpers() -> None:
    source = Path("chatbot-core/persona/client.py").read_text()
    assert "with_retry" not in source
    assert "aiohttp.ClientTimeout(total=self.timeout_seconds)" in source


def test_every_config_field_is_documented_in_env_example() -> None:
    config_source = Path("chatbot-core/config.py").read_text()
    env_example = Path(".env.example").read_text()
    for variable in (
        "TELEGRAM_BOT_TOKEN",
        "CHATBOT_OWNER_IDS",
        "CHATBOT_SETTINGS_PATH",
        "CHATBOT_API_URL",
        "CHATBOT_API_TIMEOUT_SECONDS",
        "CHATBOT_MEMORY_BACKEND",
        "CHATBOT_MEMORY_MAX_CONVERSATIONS",
        "CHATBOT_RANDOM_SEED",
    ):
        assert variable in config_source
        assert f"{variable}=" in env_example


def test_settings_writes_are_atomic() -> None:
    source = Path("chatbot-core/memory/settings_store.py").read_text()
    assert "os.replace(tmp_name, self.path)" in source
    assert "async with self._lock" in source
