"""Metadata header extraction for spec/plan/task documents.

A document opens (at its first non-blank line) with a YAML block fenced by
``---`` lines, followed by free-form Markdown:

    ---
    id: PLAN-7
    type: plan
    issue: 42
    parentId: SPEC-3
    ---
    # Plan body ...

Documents without an opening fence are not an error here: they decode to an
empty header and the validator reports the missing fields. A fence that is
opened but never closed, bad YAML, or a header that is not a mapping raise
HeaderParseError so the loader can attribute the failure to one file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

OPEN_FENCE = "---"
CLOSE_FENCES = ("---", "...")


class HeaderParseError(ValueError):
    """The metadata header of a single document could not be decoded."""


def split_header(text: str) -> tuple[dict[str, Any], str]:
    """Split ``text`` into (decoded header, body).

    Returns ``({}, text)`` when the document has no header fence.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = text.splitlines(keepends=True)

    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    if start == len(lines) or lines[start].rstrip() != OPEN_FENCE:
        return {}, text

    end = None
    for i in range(start + 1, len(lines)):
        if lines[i].rstrip() in CLOSE_FENCES:
            end = i
            break
    if end is None:
        raise HeaderParseError("unterminated metadata header (missing closing '---')")

    block = "".join(lines[start + 1:end])
    body = "".join(lines[end + 1:])
    return decode_header(block), body


def decode_header(block: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        # Collapse PyYAML's multi-line problem description into one line
        raise HeaderParseError(" ".join(str(e).split())) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise HeaderParseError(
            f"metadata header must be a mapping of key: value pairs, got {type(data).__name__}"
        )
    return {str(k): v for k, v in data.items()}


def read_document(path: Path) -> tuple[dict[str, Any], str]:
    """Read one document and split it. OSErrors propagate to the caller."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise HeaderParseError(f"file is not valid UTF-8 ({e.reason} at byte {e.start})") from e
    return split_header(text)
