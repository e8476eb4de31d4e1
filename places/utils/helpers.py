"""
General helper utilities
"""
from datetime import datetime, timezone
from typing import List, Optional


def split_csv(value: Optional[str]) -> List[str]:
    """Split a comma-separated string, trimming entries and dropping blanks"""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with a Z suffix"""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
