from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone


def utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class BotStatus:
    # Process-local health view; the gist stays the source of truth.
    ready: bool = False
    started_at: float = field(default_factory=time.monotonic)
    last_activity: str | None = None
    last_update: str | None = None
    username_count: int = 0

    def touch_activity(self) -> None:
        self.last_activity = utc_iso()

    def touch_update(self) -> None:
        self.last_update = utc_iso()

    def uptime_seconds(self) -> float:
        return max(0.0, time.monotonic() - self.started_at)

    def to_health_dict(self) -> dict:
        return {
            "ready": self.ready,
            "usernameCount": self.username_count,
            "lastActivity": self.last_activity,
            "lastUpdate": self.last_update,
            "uptime": round(self.uptime_seconds(), 3),
        }
