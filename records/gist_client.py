from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import aiohttp
from aiohttp import ClientTimeout

from config.defaults import GIST_ACCEPT
from config.defaults import GIST_API_BASE
from config.defaults import GIST_TIMEOUT_SECONDS
from config.defaults import GIST_USER_AGENT


@dataclass(slots=True)
class GistDocument:
    filename: str
    content: str
    revision: str | None = None


def _latest_revision(payload: dict[str, Any]) -> str | None:
    history = payload.get("history")
    if isinstance(history, list) and history and isinstance(history[0], dict):
        version = history[0].get("version")
        if version:
            return str(version)
    return None


def parse_gist_payload(payload: Any) -> GistDocument | None:
    if not isinstance(payload, dict):
        return None
    files = payload.get("files")
    if not isinstance(files, dict) or not files:
        return None
    filename = next(iter(files))
    entry = files.get(filename)
    if not isinstance(entry, dict):
        return None
    content = entry.get("content")
    if content is None:
        return None
    return GistDocument(filename=str(filename), content=str(content), revision=_latest_revision(payload))


class GistClient:
    """
    Reads and rewrites the one file held in a gist.

    Failures are reported by return value: fetch() gives None and replace()
    gives False. Callers must read None as "store unavailable", never as an
    empty list.
    """

    def __init__(
        self,
        *,
        gist_id: str,
        token: str,
        api_base: str = GIST_API_BASE,
        user_agent: str = GIST_USER_AGENT,
        timeout_seconds: float = GIST_TIMEOUT_SECONDS,
        session: Any = None,
    ) -> None:
        self.gist_id = str(gist_id or "").strip()
        self.token = str(token or "").strip()
        self.api_base = str(api_base or GIST_API_BASE).rstrip("/")
        self.user_agent = str(user_agent or GIST_USER_AGENT)
        self.timeout_seconds = float(timeout_seconds or GIST_TIMEOUT_SECONDS)
        self._session = session
        self._owns_session = session is None

    @property
    def url(self) -> str:
        return f"{self.api_base}/gists/{self.gist_id}"

    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": GIST_ACCEPT,
            "User-Agent": self.user_agent,
        }

    def _get_session(self):
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=ClientTimeout(total=self.timeout_seconds))
        return self._session

    async def fetch(self) -> GistDocument | None:
        try:
            async with self._get_session().get(self.url, headers=self.headers()) as resp:
                if resp.status != 200:
                    body = await resp.text()
                    print(f"[GIST] action=fetch result=http_error status={resp.status} body={body[:200]!r}")
                    return None
                payload = await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            print(f"[GIST] action=fetch result=error error={e!r}")
            return None

        doc = parse_gist_payload(payload)
        if doc is None:
            print("[GIST] action=fetch result=bad_payload")
            return None
        print(f"[GIST] action=fetch result=ok file={doc.filename} revision={doc.revision}")
        return doc

    async def replace(self, filename: str, content: str) -> bool:
        body = {"files": {filename: {"content": content}}}
        try:
            async with self._get_session().patch(self.url, json=body, headers=self.headers()) as resp:
                if 200 <= resp.status < 300:
                    print(f"[GIST] action=replace result=ok file={filename}")
                    return True
                text = await resp.text()
                print(f"[GIST] action=replace result=http_error status={resp.status} body={text[:200]!r}")
                return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            print(f"[GIST] action=replace result=error error={e!r}")
            return False

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
