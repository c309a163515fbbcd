from __future__ import annotations

import discord

from access.control import Identity


def channel_is_allowed(guild, channel, allowed_channel_id: int | None) -> bool:
    if allowed_channel_id is None:
        return True
    if guild is None:
        return True

    channel_id = int(getattr(channel, "id", 0) or 0)
    if channel_id == allowed_channel_id:
        return True
    # thread: allow if parent is the allowed channel
    if isinstance(channel, discord.Thread) and channel.parent:
        return int(channel.parent.id) == allowed_channel_id
    return False


def message_in_allowed_channel(message: discord.Message, allowed_channel_id: int | None) -> bool:
    # DMs stay open; the restriction only scopes guild traffic.
    return channel_is_allowed(getattr(message, "guild", None), message.channel, allowed_channel_id)


def interaction_in_allowed_channel(interaction: discord.Interaction, allowed_channel_id: int | None) -> bool:
    return channel_is_allowed(getattr(interaction, "guild", None), interaction.channel, allowed_channel_id)


def identity_from_user(user) -> Identity:
    role_ids = frozenset(
        int(role.id) for role in (getattr(user, "roles", None) or []) if getattr(role, "id", None) is not None
    )
    perms = getattr(user, "guild_permissions", None)
    elevated = bool(getattr(perms, "administrator", False) or getattr(perms, "manage_guild", False))
    return Identity(user_id=int(user.id), role_ids=role_ids, is_elevated=elevated)
