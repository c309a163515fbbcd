from __future__ import annotations

from functools import partial

import discord

from config.defaults import HEALTH_HOST
from config.defaults import INVITE_PERMISSIONS
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates
from misc.commands.commands_prefix import register as register_prefix
from misc.commands.commands_slash import register as register_slash
from misc.commands.router import GENERIC_FAILURE
from misc.discord_gates import identity_from_user
from misc.discord_gates import interaction_in_allowed_channel
from misc.discord_gates import message_in_allowed_channel
from misc.events_runtime import register_runtime_events
from misc.health_server import build_health_app
from misc.health_server import start_health_server
from misc.runtime_deps import RuntimeBootDeps
from misc.runtime_deps import RuntimeDeps


def bot_intents() -> discord.Intents:
    # members is privileged and not needed: guild authors already carry roles.
    intents = discord.Intents.default()
    intents.message_content = True
    return intents


def wire_bot_runtime(
    bot,
    *,
    router,
    store,
    status,
    settings,
    send_chunked,
    allowed_channel_id: int | None,
    health_port: int | None,
    health_host: str = HEALTH_HOST,
    start_health_server_func=start_health_server,
) -> None:
    def in_allowed_channel(ctx) -> bool:
        message = getattr(ctx, "message", None)
        if message is None:
            return allowed_channel_id is None
        return message_in_allowed_channel(message, allowed_channel_id)

    command_deps = CommandDeps(
        router=router,
        status=status,
        send_chunked=send_chunked,
        settings=settings,
    )
    command_gates = CommandGates(
        in_allowed_channel=in_allowed_channel,
        interaction_allowed=partial(interaction_in_allowed_channel, allowed_channel_id=allowed_channel_id),
        identity_of=identity_from_user,
    )

    register_prefix(
        bot,
        deps=command_deps,
        gates=command_gates,
    )

    register_slash(
        bot,
        deps=command_deps,
        gates=command_gates,
    )

    register_runtime_events(
        bot,
        deps=RuntimeDeps(
            status=status,
            store=store,
            command_prefix=settings.command_prefix,
            allowed_channel_id=allowed_channel_id,
            activity_text=settings.activity_text,
            generic_failure_text=GENERIC_FAILURE,
        ),
        boot=RuntimeBootDeps(
            sync_app_commands=settings.sync_app_commands,
            invite_permissions=INVITE_PERMISSIONS,
            health_port=health_port,
            health_host=health_host,
            health_app_factory=partial(build_health_app, status, service_name=settings.service_name),
            start_health_server_func=start_health_server_func,
        ),
    )
