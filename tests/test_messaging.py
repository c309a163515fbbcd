from __future__ import annotations

import unittest

try:
    from misc.messaging import chunk_text
except ModuleNotFoundError:
    chunk_text = None


@unittest.skipIf(chunk_text is None, "discord.py not installed")
class ChunkTextTests(unittest.TestCase):
    def test_short_text_is_one_chunk(self):
        self.assertEqual(chunk_text("hello", limit=10), ["hello"])

    def test_splits_on_newlines_under_limit(self):
        text = "\n".join(f"• User{i:03d}" for i in range(300))
        chunks = chunk_text(text, limit=1900)
        self.assertGreater(len(chunks), 1)
        self.assertTrue(all(len(c) <= 1900 for c in chunks))
        self.assertEqual("\n".join(chunks).split("\n"), text.split("\n"))


if __name__ == "__main__":
    unittest.main()
