from __future__ import annotations

import traceback

from access.control import AccessControl
from access.control import Identity
from config.settings import BotSettings
from misc.bot_status import BotStatus
from misc.replies import render_help
from misc.replies import render_list
from misc.replies import render_ping
from misc.replies import render_status
from misc.replies import render_whitelist
from records.codec import validate_lookup
from records.codec import validate_record
from records.service import RecordStoreService
from records.service import StoreResult

GENERIC_FAILURE = "Something went wrong handling that command. Please try again."
DENIED = "You don't have permission to use this command."
STORE_UNAVAILABLE = "Could not fetch database."


class CommandRouter:
    """
    Surface-neutral command handling. Every public coroutine returns the reply
    text; nothing raises past this class.
    """

    def __init__(
        self,
        *,
        store: RecordStoreService,
        access: AccessControl,
        status: BotStatus,
        settings: BotSettings,
    ) -> None:
        self.store = store
        self.access = access
        self.status = status
        self.settings = settings

    async def _guard(self, action: str, func, *args, **kwargs) -> str:
        try:
            return await func(*args, **kwargs)
        except Exception:
            print(f"[Router] action={action} error\n{traceback.format_exc()}")
            return GENERIC_FAILURE

    def _allowed(self, identity: Identity | None) -> bool:
        return identity is not None and self.access.is_whitelisted(identity)

    # --- records ---

    async def add(self, identity: Identity | None, raw: str, *, require_permission: bool, prefix: str = "!") -> str:
        return await self._guard("add", self._add, identity, raw, require_permission=require_permission, prefix=prefix)

    async def _add(self, identity, raw, *, require_permission: bool, prefix: str) -> str:
        if require_permission and not self._allowed(identity):
            return DENIED
        ok, name, error = validate_record(raw)
        if not ok:
            if not name:
                return f"Usage: `{prefix}add <roblox_username>`"
            return error

        result = await self.store.add(name)
        if result is StoreResult.ADDED:
            return f"**{name}** added successfully!"
        if result is StoreResult.DUPLICATE:
            return f"**{name}** already exists."
        if result is StoreResult.UNAVAILABLE:
            return STORE_UNAVAILABLE
        if result is StoreResult.CONFLICT:
            return "The list changed while adding. Please try again."
        return "Failed to add username."

    async def remove(self, identity: Identity | None, raw: str, *, prefix: str = "!") -> str:
        return await self._guard("remove", self._remove, identity, raw, prefix=prefix)

    async def _remove(self, identity, raw, *, prefix: str) -> str:
        if not self._allowed(identity):
            return DENIED
        ok, name, error = validate_lookup(raw)
        if not ok:
            if not name:
                return f"Usage: `{prefix}remove <roblox_username>`"
            return error

        result = await self.store.remove(name)
        if result is StoreResult.REMOVED:
            return f"**{name}** removed successfully!"
        if result is StoreResult.NOT_FOUND:
            return f"**{name}** not found."
        if result is StoreResult.UNAVAILABLE:
            return STORE_UNAVAILABLE
        if result is StoreResult.CONFLICT:
            return "The list changed while removing. Please try again."
        return "Failed to remove username."

    async def check(self, raw: str, *, prefix: str = "!") -> str:
        return await self._guard("check", self._check, raw, prefix=prefix)

    async def _check(self, raw, *, prefix: str) -> str:
        name = (raw or "").strip()
        if not name:
            return f"Usage: `{prefix}check <username>`"
        found = await self.store.exists(name)
        if found is None:
            return STORE_UNAVAILABLE
        return f"**{name}** exists." if found else f"**{name}** not found."

    async def list_records(self, *, limit: int | None = None, prefix: str = "!") -> str:
        return await self._guard("list", self._list_records, limit=limit, prefix=prefix)

    async def _list_records(self, *, limit: int | None, prefix: str) -> str:
        records = await self.store.fetch_records()
        if records is None:
            return STORE_UNAVAILABLE
        return render_list(records, limit or self.settings.list_display_limit, prefix=prefix)

    async def count(self) -> str:
        return await self._guard("count", self._count)

    async def _count(self) -> str:
        records = await self.store.fetch_records()
        if records is None:
            return STORE_UNAVAILABLE
        return f"**Total usernames:** {len(records)}"

    # --- info ---

    async def help(self, *, slash: bool = False) -> str:
        return render_help(prefix=self.settings.command_prefix, slash=slash)

    async def ping(self, *, latency_ms: int | None, api_latency_ms: int | None) -> str:
        return render_ping(self.status, latency_ms=latency_ms, api_latency_ms=api_latency_ms)

    async def status_report(self) -> str:
        return await self._guard("status", self._status_report, None)

    async def stats(self, identity: Identity | None) -> str:
        if not self._allowed(identity):
            return DENIED
        return await self._guard("stats", self._status_report, self.access.snapshot())

    async def _status_report(self, whitelist) -> str:
        records = await self.store.fetch_records()
        return render_status(
            self.status,
            username_count=len(records) if records is not None else None,
            whitelist=whitelist,
        )

    async def reload(self, identity: Identity | None) -> str:
        if not self._allowed(identity):
            return DENIED
        return await self._guard("reload", self._reload)

    async def _reload(self) -> str:
        count = await self.store.reload()
        if count is None:
            return STORE_UNAVAILABLE
        return f"Reloaded database: {count} usernames."

    # --- whitelist ---

    async def whitelist_add_user(self, identity: Identity | None, user_id: int) -> str:
        if not self._allowed(identity):
            return DENIED
        if self.access.add_user(user_id):
            return f"<@{int(user_id)}> added to the whitelist."
        return f"<@{int(user_id)}> is already whitelisted."

    async def whitelist_remove_user(self, identity: Identity | None, user_id: int) -> str:
        if not self._allowed(identity):
            return DENIED
        if self.access.remove_user(user_id):
            return f"<@{int(user_id)}> removed from the whitelist."
        return f"<@{int(user_id)}> is not on the whitelist."

    async def whitelist_add_role(self, identity: Identity | None, role_id: int) -> str:
        if not self._allowed(identity):
            return DENIED
        if self.access.add_role(role_id):
            return f"<@&{int(role_id)}> added to the whitelist."
        return f"<@&{int(role_id)}> is already whitelisted."

    async def whitelist_remove_role(self, identity: Identity | None, role_id: int) -> str:
        if not self._allowed(identity):
            return DENIED
        if self.access.remove_role(role_id):
            return f"<@&{int(role_id)}> removed from the whitelist."
        return f"<@&{int(role_id)}> is not on the whitelist."

    async def whitelist_list(self, identity: Identity | None) -> str:
        if not self._allowed(identity):
            return DENIED
        return render_whitelist(self.access.snapshot())
