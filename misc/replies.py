from __future__ import annotations

import resource
import sys

from config.defaults import RECORD_MAX_LEN
from config.defaults import RECORD_MIN_LEN
from misc.bot_status import BotStatus


def format_uptime(seconds: float) -> str:
    total = max(0, int(seconds))
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{hours}h {minutes}m {secs}s"


def peak_memory_mb() -> float:
    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # ru_maxrss is KB on Linux, bytes on macOS
    if sys.platform == "darwin":
        return peak / 1024 / 1024
    return peak / 1024


def render_list(records: list[str], limit: int, *, prefix: str = "!") -> str:
    if not records:
        return "No usernames found."
    limit = max(1, int(limit))
    total = len(records)
    if total <= limit:
        body = "\n".join(f"• {name}" for name in records)
        return f"**Usernames ({total}):**\n{body}"

    body = "\n".join(f"• {name}" for name in records[:limit])
    return (
        f"**First {limit} of {total} usernames:**\n{body}\n"
        f"*...and {total - limit} more. Use `{prefix}count` for the total.*"
    )


def render_help(*, prefix: str = "!", slash: bool = False) -> str:
    if slash:
        lines = [
            "**Roblox Username Bot**",
            "",
            "**Commands:**",
            "`/check <username>` - Check if a username exists",
            "`/list` - Show usernames",
            "`/count` - Show total count",
            "`/ping` - Check bot status",
            "`/help` - This message",
            "",
            "**Whitelisted:**",
            "`/add <username>` - Add a Roblox username",
            "`/remove <username>` - Remove a Roblox username",
            "`/admin stats` | `/admin reload` | `/admin whitelist ...`",
        ]
    else:
        lines = [
            "**Roblox Username Bot**",
            "",
            "**Commands:**",
            f"`{prefix}add <username>` - Add Roblox username",
            f"`{prefix}check <username>` - Check if exists",
            f"`{prefix}list` - Show usernames",
            f"`{prefix}count` - Show total count",
            f"`{prefix}help` - This message",
            f"`{prefix}ping` - Check bot status",
            f"`{prefix}status` - Bot health report",
            f"`{prefix}remove <username>` - Remove a username (whitelisted)",
        ]
    lines.append("")
    lines.append(f"**Note:** Usernames are case-sensitive ({RECORD_MIN_LEN}-{RECORD_MAX_LEN} chars)")
    return "\n".join(lines)


def render_ping(status: BotStatus, *, latency_ms: int | None, api_latency_ms: int | None) -> str:
    latency_txt = f"{latency_ms}ms" if latency_ms is not None else "n/a"
    api_txt = f"{api_latency_ms}ms" if api_latency_ms is not None else "n/a"
    return (
        "Pong!\n"
        f"• Latency: {latency_txt}\n"
        f"• API: {api_txt}\n"
        f"• Uptime: {format_uptime(status.uptime_seconds())}\n"
        f"• Status: {'Ready' if status.ready else 'Not ready'}"
    )


def render_status(status: BotStatus, *, username_count: int | None, whitelist: dict[str, list[int]] | None = None) -> str:
    lines = [
        "**Bot Status**",
        f"• Ready: {'yes' if status.ready else 'no'}",
        f"• Last Activity: {status.last_activity or 'Never'}",
        f"• Usernames: {username_count if username_count is not None else 'Unknown'}",
        f"• Last Update: {status.last_update or 'Never'}",
        f"• Peak memory: {peak_memory_mb():.2f} MB",
        f"• Uptime: {format_uptime(status.uptime_seconds())}",
    ]
    if whitelist is not None:
        lines.append(
            f"• Whitelist: admins={len(whitelist.get('admins', []))} "
            f"users={len(whitelist.get('users', []))} roles={len(whitelist.get('roles', []))}"
        )
    return "\n".join(lines)


def render_whitelist(snapshot: dict[str, list[int]]) -> str:
    def _fmt(ids: list[int], mention: str) -> str:
        if not ids:
            return "  (none)"
        return "\n".join(f"  • <{mention}{i}> ({i})" for i in ids)

    return (
        "**Whitelist**\n"
        f"Admins:\n{_fmt(snapshot.get('admins', []), '@')}\n"
        f"Users:\n{_fmt(snapshot.get('users', []), '@')}\n"
        f"Roles:\n{_fmt(snapshot.get('roles', []), '@&')}"
    )
