from __future__ import annotations

import unittest

try:
    from access.control import AccessControl
    from access.control import Identity
    from config.settings import BotSettings
    from misc.bot_status import BotStatus
    from misc.commands.router import DENIED
    from misc.commands.router import GENERIC_FAILURE
    from misc.commands.router import STORE_UNAVAILABLE
    from misc.commands.router import CommandRouter
    from records.gist_client import GistDocument
    from records.service import RecordStoreService
except ModuleNotFoundError:
    CommandRouter = None

ADMIN = 111111111111111111
STRANGER = 999999999999999999


class CountingGistClient:
    def __init__(self, content: str = "{\n}"):
        self.content = content
        self.calls = 0
        self.fail = False

    async def fetch(self):
        self.calls += 1
        if self.fail:
            return None
        return GistDocument(filename="usernames.lua", content=self.content, revision=None)

    async def replace(self, filename, content):
        self.calls += 1
        self.content = content
        return True


class ExplodingStore:
    async def fetch_records(self):
        raise RuntimeError("kaboom")

    async def add(self, record):
        raise RuntimeError("kaboom")


@unittest.skipIf(CommandRouter is None, "aiohttp/pyyaml not installed")
class CommandRouterTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.client = CountingGistClient()
        self.status = BotStatus()
        self.access = AccessControl({ADMIN})
        self.router = CommandRouter(
            store=RecordStoreService(self.client, self.status),
            access=self.access,
            status=self.status,
            settings=BotSettings(),
        )
        self.admin = Identity(user_id=ADMIN)
        self.stranger = Identity(user_id=STRANGER)

    async def test_length_is_checked_before_any_network_call(self):
        for bad in ("ab", "a" * 21):
            text = await self.router.add(self.admin, bad, require_permission=True)
            self.assertIn("3-20", text)
        self.assertEqual(self.client.calls, 0)

        for good in ("abc", "a" * 20):
            text = await self.router.add(self.admin, good, require_permission=True)
            self.assertIn("added successfully", text)

    async def test_empty_add_shows_usage(self):
        text = await self.router.add(self.admin, "   ", require_permission=False, prefix="!")
        self.assertEqual(text, "Usage: `!add <roblox_username>`")
        self.assertEqual(self.client.calls, 0)

    async def test_duplicate_add_is_reported(self):
        await self.router.add(None, "Foo123", require_permission=False)
        text = await self.router.add(None, "Foo123", require_permission=False)
        self.assertEqual(text, "**Foo123** already exists.")
        self.assertEqual(self.client.content.count('"Foo123"'), 1)

    async def test_gated_commands_deny_strangers(self):
        calls = [
            self.router.add(self.stranger, "Foo123", require_permission=True),
            self.router.remove(self.stranger, "Foo123"),
            self.router.stats(self.stranger),
            self.router.reload(self.stranger),
            self.router.whitelist_add_user(self.stranger, STRANGER),
            self.router.whitelist_remove_user(self.stranger, STRANGER),
            self.router.whitelist_add_role(self.stranger, 42),
            self.router.whitelist_remove_role(self.stranger, 42),
            self.router.whitelist_list(self.stranger),
            self.router.remove(None, "Foo123"),
        ]
        for coro in calls:
            self.assertEqual(await coro, DENIED)
        self.assertEqual(self.client.calls, 0)
        self.assertEqual(self.access.snapshot()["users"], [])

    async def test_whitelisted_user_can_grant_and_then_act(self):
        self.assertIn("added to the whitelist", await self.router.whitelist_add_user(self.admin, STRANGER))
        self.assertIn("added successfully", await self.router.add(self.stranger, "Foo123", require_permission=True))
        self.assertIn("removed successfully", await self.router.remove(self.stranger, "Foo123"))
        self.assertEqual(await self.router.remove(self.stranger, "Foo123"), "**Foo123** not found.")

    async def test_remove_handles_entries_outside_add_length_bounds(self):
        self.client.content = '{\n    "ab",\n    "ThisNameIsWayTooLong123",\n    "Foo123",\n}'
        self.assertEqual(await self.router.remove(self.admin, "ab"), "**ab** removed successfully!")
        self.assertEqual(
            await self.router.remove(self.admin, "ThisNameIsWayTooLong123"),
            "**ThisNameIsWayTooLong123** removed successfully!",
        )
        self.assertNotIn('"ab"', self.client.content)
        self.assertNotIn("ThisNameIsWayTooLong123", self.client.content)
        self.assertIn('"Foo123"', self.client.content)

    async def test_remove_rejects_empty_and_table_breaking_input(self):
        self.assertEqual(await self.router.remove(self.admin, "  "), "Usage: `!remove <roblox_username>`")
        self.assertIn("cannot contain", await self.router.remove(self.admin, "Foo}"))
        self.assertEqual(self.client.calls, 0)

    async def test_check_reports_presence(self):
        self.client.content = '{\n    "Foo123",\n}'
        self.assertEqual(await self.router.check("Foo123"), "**Foo123** exists.")
        self.assertEqual(await self.router.check("foo123"), "**foo123** not found.")
        self.assertEqual(await self.router.check(""), "Usage: `!check <username>`")

    async def test_list_truncates_past_threshold(self):
        names = [f"User{i:03d}" for i in range(23)]
        self.client.content = "{\n" + "".join(f'    "{n}",\n' for n in names) + "}"

        text = await self.router.list_records(limit=10)
        self.assertEqual(sum(1 for line in text.split("\n") if line.startswith("• ")), 10)
        self.assertIn("and 13 more", text)

    async def test_count_and_unavailable(self):
        self.client.content = '{\n    "Foo123",\n    "Bar456",\n}'
        self.assertEqual(await self.router.count(), "**Total usernames:** 2")
        self.client.fail = True
        self.assertEqual(await self.router.count(), STORE_UNAVAILABLE)
        self.assertEqual(await self.router.list_records(), STORE_UNAVAILABLE)
        self.assertEqual(await self.router.add(None, "Foo123", require_permission=False), STORE_UNAVAILABLE)

    async def test_status_report_is_open_and_stats_is_gated(self):
        text = await self.router.status_report()
        self.assertIn("**Bot Status**", text)
        self.assertNotIn("Whitelist", text)
        stats = await self.router.stats(self.admin)
        self.assertIn("Whitelist: admins=1 users=0 roles=0", stats)

    async def test_reload_reports_count(self):
        self.client.content = '{\n    "Foo123",\n}'
        self.assertEqual(await self.router.reload(self.admin), "Reloaded database: 1 usernames.")
        self.assertEqual(self.status.username_count, 1)

    async def test_unexpected_error_becomes_generic_reply(self):
        router = CommandRouter(
            store=ExplodingStore(),
            access=self.access,
            status=self.status,
            settings=BotSettings(),
        )
        self.assertEqual(await router.list_records(), GENERIC_FAILURE)
        self.assertEqual(await router.add(None, "Foo123", require_permission=False), GENERIC_FAILURE)


if __name__ == "__main__":
    unittest.main()
