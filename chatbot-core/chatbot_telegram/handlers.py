import asyncio
import logging
import random
import re
from typing import Any, Final

from telegram import Message, MessageEntity, Update
from telegram.constants import ChatAction, ChatMemberStatus, ChatType, ParseMode
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from memory.conversation import ConversationMemory
from memory.redis_client import RedisConversationMemory
from memory.settings_store import ChatbotSettingsStore
from persona.profile import PersonaProfile
from persona.responder import PersonaResponder

logger = logging.getLogger(__name__)

HELP_TEXT: Final[str] = "*Commands*\n\n*/chatbot on*\n*/chatbot off*"
REFUSAL_TEXT: Final[str] = "No."
ENABLED_TEXT: Final[str] = "*Here*"
ALREADY_ENABLED_TEXT: Final[str] = "*Already here*"
DISABLED_TEXT: Final[str] = "*Gone*"
ALREADY_DISABLED_TEXT: Final[str] = "*Already gone*"
UNKNOWN_ARGUMENT_TEXT: Final[str] = "*...*"

_ADMIN_STATUSES = (ChatMemberStatus.ADMINISTRATOR, ChatMemberStatus.OWNER)


class ChatbotHandlers:
    """``/chatbot`` toggling and in-character replies for enabled chats."""

    def __init__(
        self,
        settings_store: ChatbotSettingsStore,
        memory: ConversationMemory | RedisConversationMemory,
        responder: PersonaResponder,
        profile: PersonaProfile,
        owner_user_ids: set[int] | None = None,
        rng: random.Random | None = None,
    ):
        self.settings_store = settings_store
        self.memory = memory
        self.responder = responder
        self.profile = profile
        self.owner_user_ids = set(owner_user_ids or ())
        self._rng = rng or random.Random()

    def is_owner(self, user_id: int, bot_id: int | None) -> bool:
        return user_id == bot_id or user_id in self.owner_user_ids

    @staticmethod
    def _is_group_chat(update: Update) -> bool:
        chat_type = (update.effective_chat.type or "") if update.effective_chat else ""
        return chat_type in (ChatType.GROUP, ChatType.SUPERGROUP)

    async def _reply(self, update: Update, text: str, **kwargs: Any) -> None:
        message = update.effective_message
        if not message:
            logger.warning("No effective message found for reply")
            return
        await message.reply_text(text, do_quote=True, **kwargs)

    async def _reply_markdown(self, update: Update, text: str, **kwargs: Any) -> None:
        await self._reply(update, text, parse_mode=ParseMode.MARKDOWN, **kwargs)

    async def _show_typing(
        self,
        context: ContextTypes.DEFAULT_TYPE,
        chat_id: int,
        delay_range: tuple[float, float],
    ) -> None:
        try:
            await context.bot.send_chat_action(chat_id=chat_id, action=ChatAction.TYPING)
            await asyncio.sleep(self._rng.uniform(*delay_range))
        except TelegramError as exc:
            logger.warning("Telegram typing indicator failed for chat %s: %s", chat_id, exc)

    async def _is_group_admin(self, context: ContextTypes.DEFAULT_TYPE, chat_id: int, user_id: int) -> bool:
        try:
            member = await context.bot.get_chat_member(chat_id=chat_id, user_id=user_id)
        except TelegramError as exc:
            logger.warning("Could not fetch chat member %s in chat %s: %s", user_id, chat_id, exc)
            return False
        return member.status in _ADMIN_STATUSES

    async def _is_privileged(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> bool:
        user = update.effective_user
        if not user:
            return False
        if self.is_owner(user.id, context.bot.id):
            return True
        if not self._is_group_chat(update):
            return False
        return await self._is_group_admin(context, update.effective_chat.id, user.id)

    async def chatbot_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not update.effective_message or not update.effective_chat:
            return

        chat_id = update.effective_chat.id
        argument = context.args[0].strip().lower() if context.args else ""

        if not argument:
            await self._show_typing(context, chat_id, self.profile.command_typing_delay)
            await self._reply_markdown(update, HELP_TEXT)
            return

        if not await self._is_privileged(update, context):
            await self._show_typing(context, chat_id, self.profile.command_typing_delay)
            await self._reply(update, REFUSAL_TEXT)
            return

        await self._show_typing(context, chat_id, self.profile.command_typing_delay)
        if argument == "on":
            changed = await self.settings_store.enable(chat_id)
            await self._reply_markdown(update, ENABLED_TEXT if changed else ALREADY_ENABLED_TEXT)
        elif argument == "off":
            changed = await self.settings_store.disable(chat_id)
            await self._reply_markdown(update, DISABLED_TEXT if changed else ALREADY_DISABLED_TEXT)
        else:
            await self._reply_markdown(update, UNKNOWN_ARGUMENT_TEXT)

    @staticmethod
    def _mention_token(context: ContextTypes.DEFAULT_TYPE) -> str | None:
        username = context.bot.username
        return f"@{username.lower()}" if username else None

    @staticmethod
    def _mention_pattern(mention_token: str | None) -> re.Pattern[str] | None:
        if not mention_token:
            return None
        # Whole handle only: @thorfinn_bot must not match @thorfinn_bot_fans.
        return re.compile(r"(?<!\w)" + re.escape(mention_token) + r"(?!\w)", re.IGNORECASE)

    def _message_mentions_bot(self, message: Message, context: ContextTypes.DEFAULT_TYPE) -> bool:
        text = message.text or ""
        mention_token = self._mention_token(context)

        for entity in message.entities or []:
            if entity.type == MessageEntity.TEXT_MENTION:
                if entity.user and entity.user.id == context.bot.id:
                    return True
            elif entity.type == MessageEntity.MENTION and mention_token:
                if text[entity.offset : entity.offset + entity.length].lower() == mention_token:
                    return True

        pattern = self._mention_pattern(mention_token)
        return bool(pattern and pattern.search(text))

    @staticmethod
    def _is_reply_to_bot(message: Message, context: ContextTypes.DEFAULT_TYPE) -> bool:
        replied = message.reply_to_message
        return bool(replied and replied.from_user and replied.from_user.id == context.bot.id)

    def _strip_mention(self, text: str, mention_token: str | None) -> str:
        pattern = self._mention_pattern(mention_token)
        if not pattern:
            return text.strip()
        return pattern.sub("", text).strip()

    async def handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        if not message or not update.effective_chat or not update.effective_user:
            return

        chat_id = update.effective_chat.id
        user_text = message.text or ""
        enabled = False
        try:
            enabled = await asyncio.to_thread(self.settings_store.is_enabled, chat_id)
            if not enabled:
                return

            mentioned = self._message_mentions_bot(message, context)
            if not mentioned and not self._is_reply_to_bot(message, context):
                return

            cleaned = self._strip_mention(user_text, self._mention_token(context)) if mentioned else user_text
            conversation = self.memory.remember(update.effective_user.id, cleaned)

            if self._rng.random() < self.profile.ignore_probability and not self.profile.mentions_priority_topic(
                user_text
            ):
                logger.debug("Ignoring message in chat %s on purpose", chat_id)
                return

            await self._show_typing(context, chat_id, self.profile.reply_typing_delay)
            response = await self.responder.generate(cleaned, conversation)
            await self._reply(update, response or self.profile.silence_reply)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Error in chatbot response for chat %s: %s", chat_id, exc)
            if not enabled:
                return
            try:
                await self._reply(update, self.profile.error_reply)
            except TelegramError as reply_exc:
                logger.warning("Fallback reply failed for chat %s: %s", chat_id, reply_exc)
