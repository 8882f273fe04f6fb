from chatbot_telegram.bot import ChatbotBot
from chatbot_telegram.handlers import ChatbotHandlers

__all__ = ["ChatbotBot", "ChatbotHandlers"]
