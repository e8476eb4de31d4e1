"""
Input validation utilities
"""
from typing import List, Optional

from places.services.happy_hour import normalize_days, normalize_time


def validate_restaurant_name(name: Optional[str]) -> str:
    """Trimmed name; blank or missing names are rejected"""
    if name is None or not name.strip():
        raise ValueError("Restaurant name is required")
    return name.strip()


def validate_schedule_days(days: List[str]) -> List[str]:
    """Day abbreviations in week order, e.g. ['Mon', 'Fri']"""
    return normalize_days(days)


def validate_schedule_time(value: Optional[str]) -> Optional[str]:
    """24-hour HH:MM, or None when blank"""
    return normalize_time(value)
