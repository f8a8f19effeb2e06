"""Tests for category scheduling rules."""

from datetime import date, datetime, timedelta

import pytest

from fourd.core.categories import Category
from fourd.core.schedule import Schedule, defer_schedule, next_monday, schedule_for


@pytest.fixture
def today():
    # A Wednesday
    return date(2025, 1, 15)


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)


class TestDoSchedule:
    def test_before_cutoff_due_today(self, today):
        schedule = schedule_for(Category.DO, at(today, 17, 59))
        assert schedule.due_date == today

    def test_at_cutoff_due_tomorrow(self, today):
        schedule = schedule_for(Category.DO, at(today, 18, 0))
        assert schedule.due_date == today + timedelta(days=1)

    def test_early_morning_alert_today(self, today):
        schedule = schedule_for(Category.DO, at(today, 8, 59))
        assert schedule.alerts == (at(today, 9),)

    def test_after_nine_alert_tomorrow(self, today):
        schedule = schedule_for(Category.DO, at(today, 9, 0))
        assert schedule.due_date == today
        assert schedule.alerts == (at(today + timedelta(days=1), 9),)

    def test_evening_alert_on_due_morning(self, today):
        schedule = schedule_for(Category.DO, at(today, 20))
        tomorrow = today + timedelta(days=1)
        assert schedule.due_date == tomorrow
        assert schedule.alerts == (at(tomorrow, 9),)

    def test_month_rollover(self):
        schedule = schedule_for(Category.DO, datetime(2025, 1, 31, 19))
        assert schedule.due_date == date(2025, 2, 1)


class TestDeferSchedule:
    def test_next_monday_from_wednesday(self, today):
        schedule = schedule_for(Category.DEFER, at(today, 10))
        assert schedule.due_date == date(2025, 1, 20)
        assert schedule.alerts == (datetime(2025, 1, 20, 9),)

    def test_monday_goes_to_following_week(self):
        monday = datetime(2025, 1, 20, 0, 0)
        assert next_monday(monday) == date(2025, 1, 27)

    def test_sunday_goes_to_next_day(self):
        assert next_monday(datetime(2025, 1, 19, 23, 59)) == date(2025, 1, 20)

    def test_always_a_future_monday(self, today):
        for offset in range(14):
            now = at(today + timedelta(days=offset), 12)
            monday = next_monday(now)
            assert monday.weekday() == 0
            assert 1 <= (monday - now.date()).days <= 7


class TestDelegateSchedule:
    def test_three_days_out_at_ten(self, today):
        schedule = schedule_for(Category.DELEGATE, at(today, 23, 30))
        assert schedule.due_date == date(2025, 1, 18)
        assert schedule.alerts == (datetime(2025, 1, 18, 10),)


class TestDropSchedule:
    def test_no_due_date_no_alerts(self, today):
        assert schedule_for(Category.DROP, at(today, 12)) == Schedule()


class TestPurity:
    @pytest.mark.parametrize("category", list(Category))
    def test_same_inputs_same_output(self, category, today):
        now = at(today, 13, 37)
        assert schedule_for(category, now) == schedule_for(category, now)


class TestDeferBy:
    def test_moves_due_date_and_alert(self, today):
        now = at(today, 14, 30)
        schedule = defer_schedule(7, now)
        assert schedule.due_date == date(2025, 1, 22)
        assert schedule.alerts == (datetime(2025, 1, 22, 14, 30),)
