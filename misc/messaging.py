from __future__ import annotations

import discord

from config.defaults import DISCORD_MAX_MESSAGE_LEN


def chunk_text(text: str, limit: int = DISCORD_MAX_MESSAGE_LEN) -> list[str]:
    text = text or ""
    if len(text) <= limit:
        return [text]

    chunks = []
    remaining = text

    while len(remaining) > limit:
        # Prefer splitting on paragraph, then newline, then space
        split_at = remaining.rfind("\n\n", 0, limit)
        if split_at == -1:
            split_at = remaining.rfind("\n", 0, limit)
        if split_at == -1:
            split_at = remaining.rfind(" ", 0, limit)
        if split_at == -1:
            split_at = limit

        chunk = remaining[:split_at].strip()
        if chunk:
            chunks.append(chunk)

        remaining = remaining[split_at:].strip()

    if remaining:
        chunks.append(remaining)

    return chunks


async def send_chunked(channel: discord.abc.Messageable, text: str) -> None:
    for part in chunk_text(text, DISCORD_MAX_MESSAGE_LEN):
        await channel.send(part)


async def respond_chunked(interaction: discord.Interaction, text: str, *, ephemeral: bool = False) -> None:
    parts = chunk_text(text, DISCORD_MAX_MESSAGE_LEN)
    start = 0
    if not interaction.response.is_done():
        await interaction.response.send_message(parts[0], ephemeral=ephemeral)
        start = 1
    for part in parts[start:]:
        await interaction.followup.send(part, ephemeral=ephemeral)
