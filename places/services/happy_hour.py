"""
Happy hour schedule parsing - turns free text like "Mon-Fri 4-7pm" into
structured days and HH:MM times
"""
import re
from typing import Iterable, List, Optional, Tuple

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_DAY = r"(mon(?:day)?|tue(?:s|sday)?|wed(?:nesday)?|thu(?:rs?|rsday)?|fri(?:day)?|sat(?:urday)?|sun(?:day)?)s?\.?"
_RANGE_SEP = r"\s*(?:-|–|—|to|through|thru)\s*"

DAY_RANGE_RE = re.compile(rf"\b{_DAY}{_RANGE_SEP}{_DAY}(?![a-z])", re.IGNORECASE)
DAY_RE = re.compile(rf"\b{_DAY}(?![a-z])", re.IGNORECASE)

TIME_RANGE_RE = re.compile(
    r"(\d{1,2})(?::(\d{2}))?\s*(am|pm)?"
    r"\s*(?:-|–|—|to|until|til)\s*"
    r"(\d{1,2})(?::(\d{2}))?\s*(am|pm)?",
    re.IGNORECASE,
)
TIME_RE = re.compile(r"^\s*(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\s*$", re.IGNORECASE)


def _day_of(token: str) -> str:
    return token[:3].title()


def normalize_days(days: Iterable[str]) -> List[str]:
    """Deduplicate and sort day names into week order. Raises ValueError on unknown days."""
    seen = set()
    for day in days:
        match = DAY_RE.fullmatch(day.strip())
        if not match:
            raise ValueError(f"Unknown day: {day!r}")
        seen.add(_day_of(match.group(1)))
    return [d for d in DAY_NAMES if d in seen]


def _expand(start: str, end: str) -> List[str]:
    i, j = DAY_NAMES.index(start), DAY_NAMES.index(end)
    if i <= j:
        return list(DAY_NAMES[i:j + 1])
    # Wraps past Sunday, e.g. Fri-Mon
    return list(DAY_NAMES[i:] + DAY_NAMES[:j + 1])


def parse_days(text: str) -> List[str]:
    """Days of week mentioned in free text; every day when none are."""
    lowered = (text or "").lower()
    if "daily" in lowered or "every day" in lowered or "7 days" in lowered:
        return list(DAY_NAMES)

    days = set()
    if "weekday" in lowered:
        days.update(DAY_NAMES[:5])
    if "weekend" in lowered:
        days.update(DAY_NAMES[5:])

    for match in DAY_RANGE_RE.finditer(lowered):
        days.update(_expand(_day_of(match.group(1)), _day_of(match.group(2))))
    remainder = DAY_RANGE_RE.sub(" ", lowered)
    for match in DAY_RE.finditer(remainder):
        days.add(_day_of(match.group(1)))

    if not days:
        return list(DAY_NAMES)
    return [d for d in DAY_NAMES if d in days]


def _to_24h(hour: int, minute: int, meridiem: Optional[str]) -> str:
    if meridiem:
        meridiem = meridiem.lower()
        if hour == 12:
            hour = 0 if meridiem == "am" else 12
        elif meridiem == "pm":
            hour += 12
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid time: {hour}:{minute:02d}")
    return f"{hour:02d}:{minute:02d}"


def normalize_time(value: Optional[str]) -> Optional[str]:
    """'4pm', '4:30 PM', '16:30' -> 'HH:MM'. Blank -> None."""
    if value is None or not value.strip():
        return None
    match = TIME_RE.match(value)
    if not match:
        raise ValueError(f"Invalid time: {value!r}")
    hour, minute, meridiem = int(match.group(1)), int(match.group(2) or 0), match.group(3)
    if meridiem and not 1 <= hour <= 12:
        raise ValueError(f"Invalid time: {value!r}")
    return _to_24h(hour, minute, meridiem)


def parse_time_range(text: str) -> Tuple[Optional[str], Optional[str]]:
    """
    First time range in free text, as 24h strings.

    A missing meridiem on the start borrows the end's, unless that would put
    the start after the end ("11-2pm" is 11:00-14:00). Bare hours below 12
    with no meridiem anywhere are read as afternoon, which is what a happy
    hour listing means by "4-7".
    """
    matches = list(TIME_RANGE_RE.finditer(text or ""))
    if not matches:
        return None, None
    # Prefer a range that looks like a clock time over e.g. "$5-7 drinks"
    match = next(
        (m for m in matches if m.group(3) or m.group(6) or m.group(2) or m.group(5)),
        matches[0],
    )
    sh, sm, smer = int(match.group(1)), int(match.group(2) or 0), match.group(3)
    eh, em, emer = int(match.group(4)), int(match.group(5) or 0), match.group(6)

    if not smer and emer:
        smer = emer
        if emer.lower() == "pm" and sh != 12 and eh != 12 and sh > eh:
            smer = "am"
    if not smer and not emer:
        if 1 <= sh <= 11 and 1 <= eh <= 11 and not (match.group(2) or match.group(5)):
            smer = emer = "pm"

    try:
        return _to_24h(sh, sm, smer), _to_24h(eh, em, emer)
    except ValueError:
        return None, None


def build_schedule(
    text: Optional[str],
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
) -> dict:
    """One schedule entry from legacy happy hour text and start/end columns."""
    parsed_start, parsed_end = parse_time_range(text or "")
    try:
        start = normalize_time(start_time) or parsed_start
    except ValueError:
        start = parsed_start
    try:
        end = normalize_time(end_time) or parsed_end
    except ValueError:
        end = parsed_end
    offer = (text or "").strip() or None
    return {
        "days": parse_days(text or ""),
        "start_time": start,
        "end_time": end,
        "offer": offer,
    }
