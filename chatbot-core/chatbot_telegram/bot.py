import asyncio
import logging
import time

from telegram import Update
from telegram.error import NetworkError, TimedOut
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from chatbot_telegram.handlers import ChatbotHandlers
from persona.client import TextGenerationClient

logger = logging.getLogger(__name__)


def _is_shutdown_network_error(exc: NetworkError) -> bool:
    return "cannot schedule new futures after shutdown" in str(exc).lower()


class ChatbotBot:
    """Telegram application wiring for the chatbot feature."""

    def __init__(
        self,
        token: str | None,
        handlers: ChatbotHandlers,
        generation_client: TextGenerationClient,
        startup_retry_delay_seconds: int = 10,
    ):
        if not token:
            raise ValueError("TELEGRAM_BOT_TOKEN is required to start the Telegram bot.")
        self.token = token
        self.handlers = handlers
        self.generation_client = generation_client
        self.startup_retry_delay_seconds = startup_retry_delay_seconds

    async def _on_shutdown(self, application: Application) -> None:
        await self.generation_client.close()

    @staticmethod
    async def _on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        logger.error("Unhandled error while processing update %s", update, exc_info=context.error)

    def build_application(self) -> Application:
        app = (
            Application.builder()
            .token(self.token)
            .connect_timeout(20.0)
            .read_timeout(30.0)
            .write_timeout(30.0)
            .pool_timeout(20.0)
            .post_shutdown(self._on_shutdown)
            .build()
        )

        app.add_handler(CommandHandler("chatbot", self.handlers.chatbot_command))
        app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, self.handlers.handle_message))
        app.add_error_handler(self._on_error)
        return app

    def run(self) -> None:
        while True:
            app = self.build_application()
            loop = asyncio.new_event_loop()
            asyncio.set_event_loop(loop)

            try:
                logger.info("Starting Telegram bot...")
                app.run_polling(
                    allowed_updates=Update.ALL_TYPES,
                    close_loop=False,
                    stop_signals=None,
                )
                return
            except (TimedOut, NetworkError) as exc:
                if isinstance(exc, NetworkError) and _is_shutdown_network_error(exc):
                    logger.info("Telegram polling stopped during runtime shutdown; exiting bot loop cleanly.")
                    return
                logger.warning(
                    "Telegram startup failed (%s). Retrying in %s seconds.",
                    exc.__class__.__name__,
                    self.startup_retry_delay_seconds,
                )
                time.sleep(self.startup_retry_delay_seconds)
