from __future__ import annotations

import math

import discord
from discord.ext import commands
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates


def api_latency_ms(bot) -> int | None:
    latency = getattr(bot, "latency", None)
    if latency is None or not math.isfinite(latency):
        return None
    return round(latency * 1000)


def message_latency_ms(created_at) -> int | None:
    if created_at is None:
        return None
    delta = discord.utils.utcnow() - created_at
    return max(0, round(delta.total_seconds() * 1000))


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> None:
    router = deps.router
    prefix = deps.settings.command_prefix

    def _identity(ctx: commands.Context):
        return gates.identity_of(ctx.author) if gates.identity_of else None

    @bot.command(name="add")
    async def cmd_add(ctx: commands.Context, *, username: str = ""):
        if not gates.in_allowed_channel(ctx):
            return
        text = await router.add(
            _identity(ctx),
            username,
            require_permission=deps.settings.require_whitelist_for_prefix_add,
            prefix=prefix,
        )
        await ctx.send(text)

    @bot.command(name="remove")
    async def cmd_remove(ctx: commands.Context, *, username: str = ""):
        if not gates.in_allowed_channel(ctx):
            return
        await ctx.send(await router.remove(_identity(ctx), username, prefix=prefix))

    @bot.command(name="check")
    async def cmd_check(ctx: commands.Context, *, username: str = ""):
        if not gates.in_allowed_channel(ctx):
            return
        await ctx.send(await router.check(username, prefix=prefix))

    @bot.command(name="list")
    async def cmd_list(ctx: commands.Context):
        if not gates.in_allowed_channel(ctx):
            return
        text = await router.list_records(limit=deps.settings.list_display_limit, prefix=prefix)
        await deps.send_chunked(ctx.channel, text)

    @bot.command(name="count")
    async def cmd_count(ctx: commands.Context):
        if not gates.in_allowed_channel(ctx):
            return
        await ctx.send(await router.count())

    # "help" is taken by discord.ext's default help command
    bot.remove_command("help")

    @bot.command(name="help")
    async def cmd_help(ctx: commands.Context):
        if not gates.in_allowed_channel(ctx):
            return
        await deps.send_chunked(ctx.channel, await router.help(slash=False))

    @bot.command(name="ping")
    async def cmd_ping(ctx: commands.Context):
        if not gates.in_allowed_channel(ctx):
            return
        created_at = getattr(getattr(ctx, "message", None), "created_at", None)
        text = await router.ping(
            latency_ms=message_latency_ms(created_at),
            api_latency_ms=api_latency_ms(bot),
        )
        await ctx.send(text)

    @bot.command(name="status")
    async def cmd_status(ctx: commands.Context):
        if not gates.in_allowed_channel(ctx):
            return
        await deps.send_chunked(ctx.channel, await router.status_report())
