"""
Line-oriented codec for the username blob.

The blob is a Lua array literal kept in a gist:

    return {
        "Builderman",
        "Foo123",
    }

Records are read by quote matching and written by patching single lines, so
every line that is not the target of an edit survives byte for byte. Nothing
here parses Lua; hand edits to the gist are tolerated as long as each record
keeps its own line.
"""
from __future__ import annotations

import re

from config.defaults import CLOSE_MARKER
from config.defaults import RECORD_INDENT
from config.defaults import RECORD_MAX_LEN
from config.defaults import RECORD_MIN_LEN

QUOTED_RE = re.compile(r'"([^"]+)"')
FORBIDDEN_CHARS = ('"', CLOSE_MARKER, "\n", "\r")


def decode_records(blob_text: str) -> list[str]:
    records: list[str] = []
    for line in (blob_text or "").split("\n"):
        m = QUOTED_RE.search(line)
        if m and m.group(1):
            records.append(m.group(1))
    return records


def record_line(record: str) -> str:
    return f'{RECORD_INDENT}"{record}",'


def insert_record(blob_text: str, record: str) -> str:
    lines = (blob_text or "").split("\n")
    out: list[str] = []
    added = False
    for line in lines:
        if not added and line.strip() == CLOSE_MARKER:
            out.append(record_line(record))
            added = True
        out.append(line)

    if not added:
        # no close marker: recover by appending one
        out.append(record_line(record))
        out.append(CLOSE_MARKER)
    return "\n".join(out)


def delete_record(blob_text: str, record: str) -> tuple[str, bool]:
    targets = {f'"{record}"', f'"{record}",'}
    lines = (blob_text or "").split("\n")
    for idx, line in enumerate(lines):
        if line.strip() in targets:
            return ("\n".join(lines[:idx] + lines[idx + 1:]), True)
    return (blob_text, False)


def record_exists(blob_text: str, record: str) -> bool:
    if not record:
        return False
    pattern = re.compile('"' + re.escape(record) + '"')
    return pattern.search(blob_text or "") is not None


def validate_record(raw: str | None) -> tuple[bool, str, str | None]:
    text = (raw or "").strip()
    if not text:
        return (False, text, "missing username")
    if len(text) < RECORD_MIN_LEN or len(text) > RECORD_MAX_LEN:
        return (False, text, f"Username must be {RECORD_MIN_LEN}-{RECORD_MAX_LEN} characters.")
    if any(ch in text for ch in FORBIDDEN_CHARS):
        return (False, text, "Username cannot contain quotes, braces, or line breaks.")
    return (True, text, None)


def validate_lookup(raw: str | None) -> tuple[bool, str, str | None]:
    # No length bounds: entries added to the gist by hand may fall outside them.
    text = (raw or "").strip()
    if not text:
        return (False, text, "missing username")
    if any(ch in text for ch in FORBIDDEN_CHARS):
        return (False, text, "Username cannot contain quotes, braces, or line breaks.")
    return (True, text, None)
