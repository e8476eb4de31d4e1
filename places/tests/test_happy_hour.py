"""
Tests for happy hour text parsing.
"""
import pytest

from places.services.happy_hour import (
    DAY_NAMES,
    build_schedule,
    normalize_days,
    normalize_time,
    parse_days,
    parse_time_range,
)


# ===================== DAYS =====================


def test_normalize_days_orders_and_dedupes():
    assert normalize_days(["sunday", "Mon", "mon", "Wed."]) == ["Mon", "Wed", "Sun"]


def test_normalize_days_unknown():
    with pytest.raises(ValueError):
        normalize_days(["Funday"])


@pytest.mark.parametrize("text,expected", [
    ("Mon-Fri 4-7pm", ["Mon", "Tue", "Wed", "Thu", "Fri"]),
    ("Weekdays 5-7", ["Mon", "Tue", "Wed", "Thu", "Fri"]),
    ("weekends 2-4pm", ["Sat", "Sun"]),
    ("Tues & Thurs", ["Tue", "Thu"]),
    ("Fri-Mon 3-6pm", ["Mon", "Fri", "Sat", "Sun"]),
    ("Daily 4-6pm", list(DAY_NAMES)),
    ("$5 drafts", list(DAY_NAMES)),
])
def test_parse_days(text, expected):
    assert parse_days(text) == expected


def test_parse_days_ignores_words_starting_like_days():
    # "month" and "sunset" are not day names
    assert parse_days("Once a month, sunset special") == list(DAY_NAMES)


# ===================== TIMES =====================


@pytest.mark.parametrize("value,expected", [
    ("4pm", "16:00"),
    ("4:30 PM", "16:30"),
    ("12am", "00:00"),
    ("12pm", "12:00"),
    ("16:30", "16:30"),
    ("", None),
    (None, None),
])
def test_normalize_time(value, expected):
    assert normalize_time(value) == expected


@pytest.mark.parametrize("value", ["25:00", "13pm", "noonish"])
def test_normalize_time_invalid(value):
    with pytest.raises(ValueError):
        normalize_time(value)


@pytest.mark.parametrize("text,expected", [
    ("Mon-Fri 4-7pm", ("16:00", "19:00")),
    ("4pm - 7pm", ("16:00", "19:00")),
    ("11-2pm", ("11:00", "14:00")),
    ("5:30-7:30pm", ("17:30", "19:30")),
    ("weekdays 4-7", ("16:00", "19:00")),
    ("$5-7 wells, 4pm to 6pm", ("16:00", "18:00")),
    ("half price oysters", (None, None)),
])
def test_parse_time_range(text, expected):
    assert parse_time_range(text) == expected


# ===================== SCHEDULE =====================


def test_build_schedule_from_text():
    assert build_schedule("Mon-Thu 5-7pm $1 oysters") == {
        "days": ["Mon", "Tue", "Wed", "Thu"],
        "start_time": "17:00",
        "end_time": "19:00",
        "offer": "Mon-Thu 5-7pm $1 oysters",
    }


def test_build_schedule_columns_win():
    schedule = build_schedule("4-7pm", start_time="3pm", end_time="18:00")
    assert schedule["start_time"] == "15:00"
    assert schedule["end_time"] == "18:00"


def test_build_schedule_bad_column_falls_back():
    schedule = build_schedule("4-7pm", start_time="whenever")
    assert schedule["start_time"] == "16:00"


def test_build_schedule_times_only():
    assert build_schedule(None, "4pm", "6pm") == {
        "days": list(DAY_NAMES),
        "start_time": "16:00",
        "end_time": "18:00",
        "offer": None,
    }
