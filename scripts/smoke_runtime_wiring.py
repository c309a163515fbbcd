from __future__ import annotations

import importlib


class _DummyGistClient:
    async def fetch(self):
        return None

    async def replace(self, filename, content):
        return False


async def _noop_async(*args, **kwargs):
    return None


def _try_import_or_skip(module_name: str, pip_name: str | None = None) -> bool:
    try:
        importlib.import_module(module_name)
        return True
    except ModuleNotFoundError:
        install_name = pip_name or module_name
        print(
            f"Smoke wiring check skipped: missing dependency '{module_name}'. "
            f"Install requirements and retry (e.g. `pip install {install_name}` "
            f"or `pip install -e .`)."
        )
        return False


def _main() -> int:
    if not _try_import_or_skip("discord", "discord.py"):
        return 0

    import discord
    from discord.ext import commands
    from access.control import AccessControl
    from config.settings import BotSettings
    from misc.bot_status import BotStatus
    from misc.commands.router import CommandRouter
    from misc.runtime_wiring import wire_bot_runtime
    from records.service import RecordStoreService

    intents = discord.Intents.none()
    bot = commands.Bot(command_prefix="!", intents=intents)
    settings = BotSettings()
    status = BotStatus()
    store = RecordStoreService(_DummyGistClient(), status)
    router = CommandRouter(
        store=store,
        access=AccessControl({123456789012345678}),
        status=status,
        settings=settings,
    )

    wire_bot_runtime(
        bot,
        router=router,
        store=store,
        status=status,
        settings=settings,
        send_chunked=_noop_async,
        allowed_channel_id=None,
        health_port=None,
        start_health_server_func=_noop_async,
    )

    expected_commands = {"add", "remove", "check", "list", "count", "help", "ping", "status"}
    existing_commands = set(bot.all_commands.keys())
    missing = sorted(expected_commands - existing_commands)
    if missing:
        raise RuntimeError(f"Missing expected commands: {missing}")

    expected_slash = {"check", "list", "count", "ping", "help", "add", "remove", "admin"}
    existing_slash = {cmd.name for cmd in bot.tree.get_commands()}
    missing_slash = sorted(expected_slash - existing_slash)
    if missing_slash:
        raise RuntimeError(f"Missing expected slash commands: {missing_slash}")

    for name in ("on_ready", "on_message", "on_command_error"):
        if getattr(bot, name, None) is None:
            raise RuntimeError(f"Runtime event {name} was not registered")

    print("Smoke wiring check passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
