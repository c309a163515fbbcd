from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from config.defaults import ACTIVITY_TEXT
from config.defaults import COMMAND_PREFIX
from config.defaults import GIST_API_BASE
from config.defaults import GIST_TIMEOUT_SECONDS
from config.defaults import GIST_USER_AGENT
from config.defaults import LIST_DISPLAY_LIMIT
from config.defaults import MAX_CONFLICT_RETRIES
from config.defaults import SERVICE_NAME
from config.defaults import SLASH_LIST_DISPLAY_LIMIT


@dataclass(slots=True)
class BotSettings:
    service_name: str = SERVICE_NAME
    command_prefix: str = COMMAND_PREFIX
    activity_text: str = ACTIVITY_TEXT
    list_display_limit: int = LIST_DISPLAY_LIMIT
    slash_list_display_limit: int = SLASH_LIST_DISPLAY_LIMIT
    require_whitelist_for_prefix_add: bool = False
    sync_app_commands: bool = True
    gist_api_base: str = GIST_API_BASE
    gist_user_agent: str = GIST_USER_AGENT
    gist_timeout_seconds: float = GIST_TIMEOUT_SECONDS
    max_conflict_retries: int = MAX_CONFLICT_RETRIES


def default_settings_path() -> str:
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), "bot.yml")


def _as_int(value: Any, fallback: int, *, minimum: int = 0) -> int:
    try:
        return max(minimum, int(value))
    except (TypeError, ValueError):
        return fallback


def _as_float(value: Any, fallback: float) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError):
        return fallback
    return out if out > 0 else fallback


def _as_bool(value: Any, fallback: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"1", "true", "yes", "on"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"0", "false", "no", "off"}:
        return False
    return fallback


def _as_text(value: Any, fallback: str) -> str:
    text = str(value or "").strip()
    return text or fallback


def load_bot_settings(path: str | Path | None) -> tuple[BotSettings, str | None]:
    """
    Returns (settings, warning_message). warning_message is None on clean load.
    """
    defaults = BotSettings()
    if not path:
        return (defaults, "Bot settings path missing; using built-in defaults.")

    p = Path(path)
    if not p.exists():
        return (defaults, f"Bot settings file not found at {p}; using built-in defaults.")

    try:
        payload = yaml.safe_load(p.read_text(encoding="utf-8"))
    except Exception as exc:
        return (defaults, f"Failed to read bot settings from {p}: {exc}; using built-in defaults.")

    if payload is None:
        return (defaults, None)
    if not isinstance(payload, dict):
        return (defaults, f"Invalid bot settings format in {p}; using built-in defaults.")

    gist = payload.get("gist") if isinstance(payload.get("gist"), dict) else {}
    listing = payload.get("list") if isinstance(payload.get("list"), dict) else {}

    settings = BotSettings(
        service_name=_as_text(payload.get("service_name"), defaults.service_name),
        command_prefix=_as_text(payload.get("command_prefix"), defaults.command_prefix),
        activity_text=_as_text(payload.get("activity_text"), defaults.activity_text),
        list_display_limit=_as_int(listing.get("display_limit"), defaults.list_display_limit, minimum=1),
        slash_list_display_limit=_as_int(
            listing.get("slash_display_limit"),
            defaults.slash_list_display_limit,
            minimum=1,
        ),
        require_whitelist_for_prefix_add=_as_bool(
            payload.get("require_whitelist_for_prefix_add"),
            defaults.require_whitelist_for_prefix_add,
        ),
        sync_app_commands=_as_bool(payload.get("sync_app_commands"), defaults.sync_app_commands),
        gist_api_base=_as_text(gist.get("api_base"), defaults.gist_api_base).rstrip("/"),
        gist_user_agent=_as_text(gist.get("user_agent"), defaults.gist_user_agent),
        gist_timeout_seconds=_as_float(gist.get("timeout_seconds"), defaults.gist_timeout_seconds),
        max_conflict_retries=_as_int(gist.get("max_conflict_retries"), defaults.max_conflict_retries),
    )
    return (settings, None)
