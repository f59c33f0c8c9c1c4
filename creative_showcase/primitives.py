"""
Common primitives shared by models and services.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Union

from ulid import ULID


def generate_ulid() -> str:
    """Generate a ULID for object IDs.

    ULIDs are lexicographically sortable and globally unique.
    """
    return str(ULID())


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """ISO 8601 in UTC. Naive values (SQLite drops the offset) are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc).isoformat()
    return value.astimezone(timezone.utc).isoformat()


def split_list(raw: Union[str, Iterable[str], None]) -> List[str]:
    """
    Normalize comma-separated text (or an iterable of strings) into a list.

    - Strips whitespace from each item
    - Filters out empty strings

    Examples:
        "oil, portrait,," -> ["oil", "portrait"]
        ["  a ", ""] -> ["a"]
        None -> []
    """
    if raw is None:
        return []
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    stripped = [item.strip() for item in items]
    return [item for item in stripped if item]


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so text matches literally (escape char: backslash)."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
