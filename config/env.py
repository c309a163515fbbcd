from __future__ import annotations

import os
import re
from dataclasses import dataclass, field


def parse_id_set(raw: str | None) -> set[int]:
    if not raw:
        return set()
    out: set[int] = set()
    for tok in re.split(r"[\s,;]+", raw.strip()):
        if not tok:
            continue
        if re.fullmatch(r"\d{8,22}", tok):
            out.add(int(tok))
    return out


def parse_optional_id(raw: str | None) -> int | None:
    text = (raw or "").strip()
    if not text:
        return None
    if not re.fullmatch(r"\d{8,22}", text):
        print(f"[CFG] ignoring malformed channel id {text!r}")
        return None
    return int(text)


def parse_port(raw: str | None) -> int | None:
    text = (raw or "").strip()
    if not text:
        return None
    try:
        port = int(text)
    except ValueError:
        print(f"[CFG] invalid PORT={text!r}; liveness endpoint disabled")
        return None
    if not 0 < port < 65536:
        print(f"[CFG] PORT={port} out of range; liveness endpoint disabled")
        return None
    return port


def require_env(name: str, environ=None) -> str:
    env = os.environ if environ is None else environ
    value = (env.get(name) or "").strip()
    if not value:
        raise RuntimeError(f"Missing {name} env var")
    return value


@dataclass(frozen=True)
class EnvConfig:
    discord_token: str
    github_token: str
    gist_id: str
    port: int | None = None
    admin_ids: set[int] = field(default_factory=set)
    allowed_channel_id: int | None = None
    settings_path: str | None = None


def load_env_config(environ=None) -> EnvConfig:
    """
    Reads process configuration. Raises RuntimeError when a required token or
    the gist id is missing; optional values fall back to None/empty.
    """
    env = os.environ if environ is None else environ
    return EnvConfig(
        discord_token=require_env("DISCORD_TOKEN", env),
        github_token=require_env("GITHUB_TOKEN", env),
        gist_id=require_env("GIST_ID", env),
        port=parse_port(env.get("PORT")),
        admin_ids=parse_id_set(env.get("ADMIN_IDS")),
        allowed_channel_id=parse_optional_id(env.get("ALLOWED_CHANNEL_ID")),
        settings_path=(env.get("BOT_SETTINGS_PATH") or "").strip() or None,
    )
