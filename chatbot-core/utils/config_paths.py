from __future__ import annotations

import os
from pathlib import Path


def resolve_config_file(filename: str) -> Path:
    """Return the first existing ``filename`` under ``CHATBOT_CONFIG_DIR``, /app/config,
    /app/config.defaults, the repository ``config/`` or ``./config``.

    Falls back to the repository path when none exists.
    """

    candidates: list[Path] = []

    env_config_dir = os.getenv("CHATBOT_CONFIG_DIR")
    if env_config_dir:
        candidates.append(Path(env_config_dir) / filename)

    candidates.extend(
        [
            Path("/app/config") / filename,
            Path("/app/config.defaults") / filename,
            Path(__file__).resolve().parents[2] / "config" / filename,
            Path.cwd() / "config" / filename,
        ]
    )

    for path in candidates:
        if path.exists():
            return path

    return Path(__file__).resolve().parents[2] / "config" / filename


def resolve_data_file(path: str) -> Path:
    """Anchor a relative data path at ``CHATBOT_DATA_DIR`` (or the working directory)."""
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return candidate
    base_dir = os.getenv("CHATBOT_DATA_DIR")
    if base_dir:
        return Path(base_dir) / candidate
    return Path.cwd() / candidate
