from __future__ import annotations

import traceback

import discord
from discord import app_commands
from discord.ext import commands
from misc.discord_gates import message_in_allowed_channel
from misc.runtime_deps import RuntimeBootDeps
from misc.runtime_deps import RuntimeDeps


def invite_url(client_id: int, permissions: int) -> str:
    return (
        f"https://discord.com/oauth2/authorize?client_id={int(client_id)}"
        f"&scope=bot%20applications.commands&permissions={int(permissions)}"
    )


def register_runtime_events(
    bot: commands.Bot,
    *,
    deps: RuntimeDeps,
    boot: RuntimeBootDeps,
) -> None:
    async def setup_hook():
        if boot.health_port and not getattr(bot, "_health_runner", None):
            app = boot.health_app_factory()
            bot._health_runner = await boot.start_health_server_func(
                app,
                host=boot.health_host,
                port=boot.health_port,
            )

    bot.setup_hook = setup_hook

    @bot.event
    async def on_ready():
        deps.status.ready = True
        deps.status.touch_activity()

        print(f"[READY] Logged in as {bot.user} ({bot.user.id}) with {len(bot.guilds)} guilds.")
        print(f"[READY] Invite URL: {invite_url(bot.user.id, boot.invite_permissions)}")

        count = await deps.store.reload()
        if count is not None:
            print(f"[READY] Total usernames in database: {count}")
        else:
            print("[READY] Could not read the username database on startup")

        await bot.change_presence(activity=discord.Game(name=deps.activity_text))

        if boot.sync_app_commands and not getattr(bot, "_app_commands_synced", False):
            try:
                synced = await bot.tree.sync()
                bot._app_commands_synced = True
                print(f"[READY] Synced {len(synced)} application commands")
            except discord.HTTPException as e:
                print(f"[READY] Application command sync failed: {e}")

    @bot.event
    async def on_message(message: discord.Message):
        if message.author.bot:
            return
        if not message_in_allowed_channel(message, deps.allowed_channel_id):
            return

        deps.status.touch_activity()

        if (message.content or "").lstrip().startswith(deps.command_prefix):
            await bot.process_commands(message)

    @bot.event
    async def on_command_error(ctx: commands.Context, error: commands.CommandError):
        if isinstance(error, commands.CommandNotFound):
            return
        original = getattr(error, "original", error)
        print(f"[Command] {getattr(ctx.command, 'name', '?')} error: {original!r}")
        traceback.print_exception(type(original), original, original.__traceback__)
        try:
            await ctx.send(deps.generic_failure_text)
        except discord.HTTPException as e:
            print(f"[Command] could not report error: {e}")

    @bot.tree.error
    async def on_app_command_error(interaction: discord.Interaction, error: app_commands.AppCommandError):
        original = getattr(error, "original", error)
        name = getattr(interaction.command, "qualified_name", "?")
        print(f"[AppCommand] /{name} error: {original!r}")
        traceback.print_exception(type(original), original, original.__traceback__)
        try:
            if interaction.response.is_done():
                await interaction.followup.send(deps.generic_failure_text, ephemeral=True)
            else:
                await interaction.response.send_message(deps.generic_failure_text, ephemeral=True)
        except discord.HTTPException as e:
            print(f"[AppCommand] could not report error: {e}")
