import asyncio

from discord.ext import commands
from dotenv import load_dotenv

from access.control import AccessControl
from config.env import load_env_config
from config.settings import default_settings_path
from config.settings import load_bot_settings
from misc.bot_status import BotStatus
from misc.commands.router import CommandRouter
from misc.messaging import send_chunked
from misc.runtime_wiring import bot_intents
from misc.runtime_wiring import wire_bot_runtime
from records.gist_client import GistClient
from records.service import RecordStoreService

load_dotenv()

# =========================
# ENV
# =========================
ENV = load_env_config()
print(f"[CFG] gist_id={ENV.gist_id} port={ENV.port or '(disabled)'} "
      f"admin_ids={len(ENV.admin_ids)} allowed_channel={ENV.allowed_channel_id or '(any)'}")

SETTINGS_PATH = ENV.settings_path or default_settings_path()
SETTINGS, SETTINGS_WARNING = load_bot_settings(SETTINGS_PATH)
if SETTINGS_WARNING:
    print(f"[CFG] {SETTINGS_WARNING}")
print(
    f"[CFG] settings path={SETTINGS_PATH} prefix={SETTINGS.command_prefix!r} "
    f"list_limit={SETTINGS.list_display_limit}/{SETTINGS.slash_list_display_limit} "
    f"prefix_add_gated={SETTINGS.require_whitelist_for_prefix_add} "
    f"conflict_retries={SETTINGS.max_conflict_retries}"
)

# =========================
# STATE
# =========================
status = BotStatus()
access = AccessControl(ENV.admin_ids)

gist_client = GistClient(
    gist_id=ENV.gist_id,
    token=ENV.github_token,
    api_base=SETTINGS.gist_api_base,
    user_agent=SETTINGS.gist_user_agent,
    timeout_seconds=SETTINGS.gist_timeout_seconds,
)
store = RecordStoreService(gist_client, status, max_conflict_retries=SETTINGS.max_conflict_retries)
router = CommandRouter(store=store, access=access, status=status, settings=SETTINGS)

# =========================
# DISCORD BOT
# =========================
bot = commands.Bot(command_prefix=SETTINGS.command_prefix, intents=bot_intents())

wire_bot_runtime(
    bot,
    router=router,
    store=store,
    status=status,
    settings=SETTINGS,
    send_chunked=send_chunked,
    allowed_channel_id=ENV.allowed_channel_id,
    health_port=ENV.port,
)


async def main() -> None:
    print("Starting Roblox Username Bot...")
    try:
        async with bot:
            await bot.start(ENV.discord_token)
    finally:
        runner = getattr(bot, "_health_runner", None)
        if runner is not None:
            await runner.cleanup()
        await gist_client.close()


if __name__ == "__main__":
    asyncio.run(main())
