from __future__ import annotations

import asyncio
from enum import Enum

from misc.bot_status import BotStatus
from records.codec import decode_records
from records.codec import delete_record
from records.codec import insert_record
from records.codec import record_exists
from records.gist_client import GistDocument


class StoreResult(str, Enum):
    ADDED = "added"
    DUPLICATE = "duplicate"
    REMOVED = "removed"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"
    CONFLICT = "conflict"


class RecordStoreService:
    """
    Fetch-modify-write over the gist blob.

    Mutations in this process are serialized by one asyncio.Lock. Writers in
    other processes are caught by comparing the gist revision read at the
    start of an attempt with the revision just before the write; on mismatch
    the whole attempt is redone, at most max_conflict_retries extra times.
    A write that lands between that check and the PATCH can still be lost.
    """

    def __init__(self, client, status: BotStatus, *, max_conflict_retries: int = 2) -> None:
        self.client = client
        self.status = status
        self.max_conflict_retries = max(0, int(max_conflict_retries))
        self._write_lock = asyncio.Lock()

    def _remember_count(self, content: str) -> int:
        count = len(decode_records(content))
        self.status.username_count = count
        return count

    async def fetch_records(self) -> list[str] | None:
        doc = await self.client.fetch()
        if doc is None:
            return None
        records = decode_records(doc.content)
        self.status.username_count = len(records)
        return records

    async def exists(self, record: str) -> bool | None:
        doc = await self.client.fetch()
        if doc is None:
            return None
        return record_exists(doc.content, record)

    async def reload(self) -> int | None:
        doc = await self.client.fetch()
        if doc is None:
            return None
        return self._remember_count(doc.content)

    async def _commit(self, doc: GistDocument, new_content: str, success: StoreResult) -> StoreResult | None:
        # None means the revision moved and the caller should retry.
        if doc.revision is not None:
            latest = await self.client.fetch()
            if latest is None:
                return StoreResult.UNAVAILABLE
            if latest.revision != doc.revision:
                print(f"[STORE] revision moved {doc.revision} -> {latest.revision}; retrying")
                return None
        ok = await self.client.replace(doc.filename, new_content)
        if not ok:
            return StoreResult.FAILED
        self.status.touch_update()
        self._remember_count(new_content)
        return success

    async def add(self, record: str) -> StoreResult:
        async with self._write_lock:
            for attempt in range(self.max_conflict_retries + 1):
                doc = await self.client.fetch()
                if doc is None:
                    print(f"[STORE] action=add result=unavailable record={record}")
                    return StoreResult.UNAVAILABLE
                if record_exists(doc.content, record):
                    print(f"[STORE] action=add result=duplicate record={record}")
                    return StoreResult.DUPLICATE

                outcome = await self._commit(doc, insert_record(doc.content, record), StoreResult.ADDED)
                if outcome is None:
                    continue
                print(f"[STORE] action=add result={outcome.value} record={record} attempt={attempt + 1}")
                return outcome

        print(f"[STORE] action=add result=conflict record={record}")
        return StoreResult.CONFLICT

    async def remove(self, record: str) -> StoreResult:
        async with self._write_lock:
            for attempt in range(self.max_conflict_retries + 1):
                doc = await self.client.fetch()
                if doc is None:
                    print(f"[STORE] action=remove result=unavailable record={record}")
                    return StoreResult.UNAVAILABLE
                new_content, found = delete_record(doc.content, record)
                if not found:
                    print(f"[STORE] action=remove result=not_found record={record}")
                    return StoreResult.NOT_FOUND

                outcome = await self._commit(doc, new_content, StoreResult.REMOVED)
                if outcome is None:
                    continue
                print(f"[STORE] action=remove result={outcome.value} record={record} attempt={attempt + 1}")
                return outcome

        print(f"[STORE] action=remove result=conflict record={record}")
        return StoreResult.CONFLICT
