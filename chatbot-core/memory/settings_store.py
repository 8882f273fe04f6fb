from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _default_document() -> dict[str, Any]:
    return {"groups": [], "chatbot": {}}


class ChatbotSettingsStore:
    """JSON document mapping chat id -> ``true`` under its ``chatbot`` key.

    The rest of the document (``groups`` and anything else) belongs to other
    features and is written back untouched. Toggles run one at a time under a
    lock and replace the file atomically.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def load(self) -> dict[str, Any]:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError:
            logger.debug("Chatbot settings file %s does not exist yet; using defaults.", self.path)
            return _default_document()
        except (OSError, ValueError) as exc:
            logger.error("Error loading chatbot settings from %s: %s", self.path, exc)
            return _default_document()

        if not isinstance(data, dict):
            logger.error("Chatbot settings in %s are not a JSON object; using defaults.", self.path)
            return _default_document()
        if not isinstance(data.get("chatbot"), dict):
            data["chatbot"] = {}
        return data

    def save(self, data: dict[str, Any]) -> None:
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                json.dump(data, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error saving chatbot settings to %s: %s", self.path, exc)
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

    def is_enabled(self, chat_id: int | str) -> bool:
        return bool(self.load()["chatbot"].get(str(chat_id)))

    async def enable(self, chat_id: int | str) -> bool:
        """Turn the chatbot on; ``False`` means it already was."""
        async with self._lock:
            data = self.load()
            key = str(chat_id)
            if data["chatbot"].get(key):
                return False
            data["chatbot"][key] = True
            self.save(data)
        logger.info("Chatbot enabled for chat %s", chat_id)
        return True

    async def disable(self, chat_id: int | str) -> bool:
        """Turn the chatbot off; ``False`` means it was not on."""
        async with self._lock:
            data = self.load()
            key = str(chat_id)
            if not data["chatbot"].get(key):
                return False
            del data["chatbot"][key]
            self.save(data)
        logger.info("Chatbot disabled for chat %s", chat_id)
        return True
