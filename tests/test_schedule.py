from datetime import date, datetime, timedelta, timezone

import pytest

from comic import schedule
from comic.schedule import CRON_DAYLIGHT, CRON_STANDARD


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "instant, expected",
    [
        (_utc(2025, 1, 15, 15), False),
        (_utc(2025, 3, 8, 15), False),
        (_utc(2025, 3, 10, 15), True),
        (_utc(2025, 7, 4, 14), True),
        (_utc(2025, 11, 1, 14), True),
        (_utc(2025, 11, 3, 15), False),
        (_utc(2024, 3, 9, 15), False),
        (_utc(2024, 3, 11, 14), True),
    ],
)
def test_is_dst_observed_around_us_transitions(instant, expected):
    assert schedule.is_dst_observed(instant) is expected


def test_standard_offset_is_eastern_standard_time():
    local = _utc(2025, 7, 1).astimezone(schedule.REFERENCE_TZ)
    assert schedule.standard_utc_offset(local) == timedelta(hours=-5)


def test_exactly_one_cron_runs_each_day():
    day = date(2025, 1, 1)
    while day.year == 2025:
        standard = schedule.should_proceed(CRON_STANDARD, _utc(day.year, day.month, day.day, 15))
        daylight = schedule.should_proceed(CRON_DAYLIGHT, _utc(day.year, day.month, day.day, 14))
        assert standard != daylight, day
        day += timedelta(days=1)


def test_standard_cron_skips_during_daylight_time():
    assert schedule.should_proceed(CRON_STANDARD, _utc(2025, 6, 1, 15)) is False
    assert schedule.should_proceed(CRON_DAYLIGHT, _utc(2025, 6, 1, 14)) is True


@pytest.mark.parametrize("cron", ["", None, "30 12 * * *"])
def test_unknown_cron_always_proceeds(cron):
    assert schedule.should_proceed(cron, _utc(2025, 6, 1, 12)) is True
    assert schedule.should_proceed(cron, _utc(2025, 12, 1, 12)) is True


def test_date_path_uses_utc_fields_without_padding():
    eastern_evening = datetime(2025, 3, 4, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    assert schedule.date_path(eastern_evening) == "2025/3/5"
    assert schedule.date_path(datetime(2025, 10, 9, 1, 0)) == "2025/10/9"


def test_date_path_is_stable_and_distinct_per_day():
    start = _utc(2024, 1, 1, 14)
    paths = [schedule.date_path(start + timedelta(days=n)) for n in range(366)]
    assert len(set(paths)) == 366
    assert schedule.date_path(start) == schedule.date_path(start) == "2024/1/1"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2025-03-14T00:00:00.000Z", "2025/3/14"),
        ("2025-03-14", "2025/3/14"),
        ("2025-03-14T22:00:00-05:00", "2025/3/15"),
        ("March 14, 2025", "2025/3/14"),
        ("Mar 4, 2025", "2025/3/4"),
        ("", None),
        ("not a date", None),
    ],
)
def test_published_date_path(value, expected):
    assert schedule.published_date_path(value) == expected


def test_attachment_filename_hyphenates_path():
    assert schedule.attachment_filename("2025/3/14") == "2025-3-14.png"
