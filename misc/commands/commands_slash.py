from __future__ import annotations

import discord
from discord import app_commands
from discord.ext import commands
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates
from misc.commands.commands_prefix import api_latency_ms
from misc.commands.commands_prefix import message_latency_ms
from misc.messaging import respond_chunked


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> None:
    router = deps.router
    tree = bot.tree
    list_limit = deps.settings.slash_list_display_limit

    def _identity(interaction: discord.Interaction):
        return gates.identity_of(interaction.user) if gates.identity_of else None

    async def _enter(interaction: discord.Interaction, *, ephemeral: bool = False) -> bool:
        if deps.status is not None:
            deps.status.touch_activity()
        if not gates.interaction_allowed(interaction):
            await interaction.response.send_message("Commands are not available in this channel.", ephemeral=True)
            return False
        await interaction.response.defer(ephemeral=ephemeral, thinking=True)
        return True

    # --- public ---

    @tree.command(name="check", description="Check if a Roblox username is on the list.")
    @app_commands.describe(username="Roblox username (case-sensitive)")
    async def slash_check(interaction: discord.Interaction, username: str):
        if not await _enter(interaction):
            return
        await respond_chunked(interaction, await router.check(username, prefix="/"))

    @tree.command(name="list", description="Show stored Roblox usernames.")
    async def slash_list(interaction: discord.Interaction):
        if not await _enter(interaction):
            return
        await respond_chunked(interaction, await router.list_records(limit=list_limit, prefix="/"))

    @tree.command(name="count", description="Show the total number of usernames.")
    async def slash_count(interaction: discord.Interaction):
        if not await _enter(interaction):
            return
        await respond_chunked(interaction, await router.count())

    @tree.command(name="ping", description="Check bot latency and uptime.")
    async def slash_ping(interaction: discord.Interaction):
        if not await _enter(interaction):
            return
        text = await router.ping(
            latency_ms=message_latency_ms(getattr(interaction, "created_at", None)),
            api_latency_ms=api_latency_ms(bot),
        )
        await respond_chunked(interaction, text)

    @tree.command(name="help", description="Show available commands.")
    async def slash_help(interaction: discord.Interaction):
        if not await _enter(interaction, ephemeral=True):
            return
        await respond_chunked(interaction, await router.help(slash=True), ephemeral=True)

    # --- whitelisted ---

    @tree.command(name="add", description="Add a Roblox username (whitelisted).")
    @app_commands.describe(username="Roblox username, 3-20 characters")
    async def slash_add(interaction: discord.Interaction, username: str):
        if not await _enter(interaction):
            return
        text = await router.add(_identity(interaction), username, require_permission=True, prefix="/")
        await respond_chunked(interaction, text)

    @tree.command(name="remove", description="Remove a Roblox username (whitelisted).")
    @app_commands.describe(username="Roblox username to remove")
    async def slash_remove(interaction: discord.Interaction, username: str):
        if not await _enter(interaction):
            return
        await respond_chunked(interaction, await router.remove(_identity(interaction), username, prefix="/"))

    admin = app_commands.Group(name="admin", description="Whitelisted management commands.")
    whitelist = app_commands.Group(name="whitelist", description="Manage who may change the list.", parent=admin)

    @admin.command(name="add", description="Add a Roblox username.")
    @app_commands.describe(username="Roblox username, 3-20 characters")
    async def admin_add(interaction: discord.Interaction, username: str):
        if not await _enter(interaction, ephemeral=True):
            return
        text = await router.add(_identity(interaction), username, require_permission=True, prefix="/admin ")
        await respond_chunked(interaction, text, ephemeral=True)

    @admin.command(name="remove", description="Remove a Roblox username.")
    @app_commands.describe(username="Roblox username to remove")
    async def admin_remove(interaction: discord.Interaction, username: str):
        if not await _enter(interaction, ephemeral=True):
            return
        text = await router.remove(_identity(interaction), username, prefix="/admin ")
        await respond_chunked(interaction, text, ephemeral=True)

    @admin.command(name="stats", description="Show bot health and whitelist sizes.")
    async def admin_stats(interaction: discord.Interaction):
        if not await _enter(interaction, ephemeral=True):
            return
        await respond_chunked(interaction, await router.stats(_identity(interaction)), ephemeral=True)

    @admin.command(name="reload", description="Re-read the username list from the gist.")
    async def admin_reload(interaction: discord.Interaction):
        if not await _enter(interaction, ephemeral=True):
            return
        await respond_chunked(interaction, await router.reload(_identity(interaction)), ephemeral=True)

    @whitelist.command(name="adduser", description="Allow a user to change the list.")
    @app_commands.describe(user="User to whitelist")
    async def whitelist_adduser(interaction: discord.Interaction, user: discord.User):
        if not await _enter(interaction, ephemeral=True):
            return
        text = await router.whitelist_add_user(_identity(interaction), int(user.id))
        await respond_chunked(interaction, text, ephemeral=True)

    @whitelist.command(name="removeuser", description="Revoke a user's whitelist entry.")
    @app_commands.describe(user="User to remove")
    async def whitelist_removeuser(interaction: discord.Interaction, user: discord.User):
        if not await _enter(interaction, ephemeral=True):
            return
        text = await router.whitelist_remove_user(_identity(interaction), int(user.id))
        await respond_chunked(interaction, text, ephemeral=True)

    @whitelist.command(name="addrole", description="Allow every member of a role to change the list.")
    @app_commands.describe(role="Role to whitelist")
    async def whitelist_addrole(interaction: discord.Interaction, role: discord.Role):
        if not await _enter(interaction, ephemeral=True):
            return
        text = await router.whitelist_add_role(_identity(interaction), int(role.id))
        await respond_chunked(interaction, text, ephemeral=True)

    @whitelist.command(name="removerole", description="Revoke a role's whitelist entry.")
    @app_commands.describe(role="Role to remove")
    async def whitelist_removerole(interaction: discord.Interaction, role: discord.Role):
        if not await _enter(interaction, ephemeral=True):
            return
        text = await router.whitelist_remove_role(_identity(interaction), int(role.id))
        await respond_chunked(interaction, text, ephemeral=True)

    @whitelist.command(name="list", description="Show admins and whitelisted users and roles.")
    async def whitelist_list(interaction: discord.Interaction):
        if not await _enter(interaction, ephemeral=True):
            return
        await respond_chunked(interaction, await router.whitelist_list(_identity(interaction)), ephemeral=True)

    tree.add_command(admin)
