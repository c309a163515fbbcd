from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class RuntimeDeps:
    # core
    status: Any
    store: Any
    command_prefix: str
    allowed_channel_id: int | None

    # presence / replies
    activity_text: str
    generic_failure_text: str


@dataclass(frozen=True)
class RuntimeBootDeps:
    sync_app_commands: bool
    invite_permissions: int
    health_port: int | None
    health_host: str
    health_app_factory: Callable
    start_health_server_func: Callable
