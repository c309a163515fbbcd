from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


@dataclass(frozen=True)
class Identity:
    user_id: int
    role_ids: frozenset[int] = field(default_factory=frozenset)
    is_elevated: bool = False


class AccessControl:
    """
    Static admins plus a runtime whitelist of users and roles.

    The whitelist lives in memory only and starts empty on every boot, so
    trust always traces back to the configured admin ids.
    """

    def __init__(
        self,
        admin_ids: Iterable[int],
        whitelisted_user_ids: Iterable[int] = (),
        whitelisted_role_ids: Iterable[int] = (),
    ) -> None:
        self.admin_ids: frozenset[int] = frozenset(int(x) for x in admin_ids)
        self.user_ids: set[int] = {int(x) for x in whitelisted_user_ids}
        self.role_ids: set[int] = {int(x) for x in whitelisted_role_ids}

    def is_admin(self, user_id: int) -> bool:
        return int(user_id) in self.admin_ids

    def is_whitelisted(self, identity: Identity) -> bool:
        if self.is_admin(identity.user_id):
            return True
        if int(identity.user_id) in self.user_ids:
            return True
        if self.role_ids.intersection(identity.role_ids):
            return True
        return bool(identity.is_elevated)

    def add_user(self, user_id: int) -> bool:
        uid = int(user_id)
        if uid in self.user_ids:
            return False
        self.user_ids.add(uid)
        print(f"[ACCESS] whitelist add user={uid}")
        return True

    def remove_user(self, user_id: int) -> bool:
        uid = int(user_id)
        if uid not in self.user_ids:
            return False
        self.user_ids.discard(uid)
        print(f"[ACCESS] whitelist remove user={uid}")
        return True

    def add_role(self, role_id: int) -> bool:
        rid = int(role_id)
        if rid in self.role_ids:
            return False
        self.role_ids.add(rid)
        print(f"[ACCESS] whitelist add role={rid}")
        return True

    def remove_role(self, role_id: int) -> bool:
        rid = int(role_id)
        if rid not in self.role_ids:
            return False
        self.role_ids.discard(rid)
        print(f"[ACCESS] whitelist remove role={rid}")
        return True

    def snapshot(self) -> dict[str, list[int]]:
        return {
            "admins": sorted(self.admin_ids),
            "users": sorted(self.user_ids),
            "roles": sorted(self.role_ids),
        }
