from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Callable

from config.settings import BotSettings


def _default_true(*args, **kwargs) -> bool:
    return True


@dataclass(frozen=True)
class CommandDeps:
    router: Any = None
    status: Any = None
    send_chunked: Callable | None = None
    settings: BotSettings = field(default_factory=BotSettings)


@dataclass(frozen=True)
class CommandGates:
    in_allowed_channel: Callable[[Any], bool] = _default_true
    interaction_allowed: Callable[[Any], bool] = _default_true
    identity_of: Callable[[Any], Any] | None = None
