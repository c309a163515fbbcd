from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from config.env import load_env_config
from config.env import parse_id_set
from config.env import parse_optional_id
from config.env import parse_port

try:
    import yaml
    from config.settings import BotSettings
    from config.settings import default_settings_path
    from config.settings import load_bot_settings
except ModuleNotFoundError:
    yaml = None

BASE_ENV = {
    "DISCORD_TOKEN": "discord-token",
    "GITHUB_TOKEN": "ghp_token",
    "GIST_ID": "abc123",
}


class EnvConfigTests(unittest.TestCase):
    def test_required_values_are_fatal_when_missing(self):
        for name in ("DISCORD_TOKEN", "GITHUB_TOKEN", "GIST_ID"):
            env = dict(BASE_ENV)
            env[name] = "   "
            with self.assertRaises(RuntimeError) as cm:
                load_env_config(env)
            self.assertIn(name, str(cm.exception))

    def test_optional_values(self):
        env = dict(BASE_ENV)
        env.update(
            {
                "PORT": "8080",
                "ADMIN_IDS": "123456789012345678, 223456789012345678;bogus",
                "ALLOWED_CHANNEL_ID": "323456789012345678",
            }
        )
        cfg = load_env_config(env)
        self.assertEqual(cfg.port, 8080)
        self.assertEqual(cfg.admin_ids, {123456789012345678, 223456789012345678})
        self.assertEqual(cfg.allowed_channel_id, 323456789012345678)
        self.assertIsNone(cfg.settings_path)

    def test_optional_values_default_off(self):
        cfg = load_env_config(dict(BASE_ENV))
        self.assertIsNone(cfg.port)
        self.assertEqual(cfg.admin_ids, set())
        self.assertIsNone(cfg.allowed_channel_id)

    def test_parsers_reject_garbage(self):
        self.assertIsNone(parse_port("http"))
        self.assertIsNone(parse_port("70000"))
        self.assertIsNone(parse_optional_id("general"))
        self.assertEqual(parse_id_set(None), set())


@unittest.skipIf(yaml is None, "pyyaml not installed")
class BotSettingsTests(unittest.TestCase):
    def test_shipped_settings_file_loads_cleanly(self):
        settings, warning = load_bot_settings(default_settings_path())
        self.assertIsNone(warning)
        self.assertEqual(settings.list_display_limit, 10)
        self.assertEqual(settings.slash_list_display_limit, 15)
        self.assertFalse(settings.require_whitelist_for_prefix_add)

    def test_missing_file_falls_back_with_warning(self):
        settings, warning = load_bot_settings("/nonexistent/bot.yml")
        self.assertEqual(settings, BotSettings())
        self.assertIn("not found", warning)

    def test_partial_and_bad_values_fall_back_per_field(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bot.yml"
            path.write_text(
                yaml.safe_dump(
                    {
                        "command_prefix": "?",
                        "require_whitelist_for_prefix_add": "yes",
                        "list": {"display_limit": "lots", "slash_display_limit": 20},
                        "gist": {"api_base": "https://ghe.example.com/api/v3/", "timeout_seconds": -1},
                    }
                ),
                encoding="utf-8",
            )
            settings, warning = load_bot_settings(path)

        self.assertIsNone(warning)
        self.assertEqual(settings.command_prefix, "?")
        self.assertTrue(settings.require_whitelist_for_prefix_add)
        self.assertEqual(settings.list_display_limit, 10)
        self.assertEqual(settings.slash_list_display_limit, 20)
        self.assertEqual(settings.gist_api_base, "https://ghe.example.com/api/v3")
        self.assertEqual(settings.gist_timeout_seconds, 15.0)

    def test_non_mapping_file_is_rejected(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bot.yml"
            path.write_text("- just\n- a list\n", encoding="utf-8")
            settings, warning = load_bot_settings(path)
        self.assertEqual(settings, BotSettings())
        self.assertIn("Invalid", warning)


if __name__ == "__main__":
    unittest.main()
