"""General text helpers."""

import re
from pathlib import PurePosixPath
from typing import Optional

__all__ = ("leading_keyword", "normalize_template_name")

_LEADING_COMMENTS_RE = re.compile(r"^(?:\s+|--[^\n]*(?:\n|$)|/\*.*?\*/)+", re.DOTALL)
_KEYWORD_RE = re.compile(r"[A-Za-z]+")


def normalize_template_name(name: str) -> Optional[str]:
    """Normalize a logical template name to a relative POSIX path.

    Backslashes are treated as separators and ``.`` segments are dropped.

    Args:
        name: Logical template name, e.g. ``"customers/insert.sql"``.

    Returns:
        The normalized name, or ``None`` when the name is empty, absolute or escapes the root.
    """
    cleaned = name.strip().replace("\\", "/")
    if not cleaned or cleaned.startswith("/"):
        return None
    parts = [part for part in PurePosixPath(cleaned).parts if part not in {"", "."}]
    if not parts or ".." in parts:
        return None
    return "/".join(parts)


def leading_keyword(sql: str) -> str:
    """Return the first SQL keyword in upper case, skipping comments.

    Args:
        sql: SQL text.

    Returns:
        The keyword, or ``"UNKNOWN"`` when the text has none.
    """
    body = _LEADING_COMMENTS_RE.sub("", sql, count=1)
    match = _KEYWORD_RE.match(body)
    return match.group(0).upper() if match else "UNKNOWN"
