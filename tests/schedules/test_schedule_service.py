from __future__ import annotations

from datetime import date, time

import pytest

from src.workforce_system.workforce_system.core.enums import Role, ScheduleStatus
from src.workforce_system.workforce_system.core.exceptions import (
    AuthorizationError,
    InvalidTimeRangeError,
    NotFoundError,
    ValidationError,
)
from src.workforce_system.workforce_system.schedules.model import DayShift, WorkSchedule
from src.workforce_system.workforce_system.schedules.service import ScheduleService, parse_week

MONDAY = date(2025, 10, 6)
WEEKDAYS_9_TO_5 = {day: ("09:00", "17:00") for day in ("monday", "tuesday", "wednesday", "thursday", "friday")}


class FakeScheduleRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, WorkSchedule] = {}

    def list_all(self, *, department_id=None):
        return [s for s in self.rows.values() if department_id is None or s.department_id == department_id]

    def get_by_id(self, schedule_id):
        return self.rows.get(int(schedule_id))

    def create(self, **fields):
        sid = self._next_id
        self._next_id += 1
        self.rows[sid] = WorkSchedule(schedule_id=sid, **fields)
        return sid

    def save(self, schedule):
        if schedule.schedule_id not in self.rows:
            return False
        self.rows[schedule.schedule_id] = schedule
        return True

    def delete(self, *, schedule_id):
        return self.rows.pop(schedule_id, None) is not None


def make_service():
    repo = FakeScheduleRepo()
    return ScheduleService(repo), repo


def test_create_schedule():
    service, repo = make_service()
    sid = service.create_schedule(
        current_role=Role.HR_MANAGER,
        name=" Office ",
        effective_date=MONDAY,
        days=WEEKDAYS_9_TO_5,
        department_id=2,
    )

    schedule = repo.rows[sid]
    assert schedule.name == "Office"
    assert schedule.days[0] == DayShift(start=time(9), end=time(17))
    assert 5 not in schedule.days
    assert schedule.weekly_hours == 40.0
    assert schedule.status == ScheduleStatus.ACTIVE


def test_scheduler_cannot_manage_schedules():
    service, repo = make_service()
    with pytest.raises(AuthorizationError):
        service.create_schedule(current_role=Role.SCHEDULER, name="Office", effective_date=MONDAY, days=WEEKDAYS_9_TO_5)
    assert repo.rows == {}


def test_parse_week_accepts_names_indexes_and_overnight():
    week = parse_week({"Saturday": {"start": "22:00", "end": "06:00"}, 0: ["08:00", "16:00"], "sunday": None})

    assert week == {5: DayShift(start=time(22), end=time(6)), 0: DayShift(start=time(8), end=time(16))}
    assert week[5].hours == 8.0


@pytest.mark.parametrize(
    "days, error",
    [
        ({"someday": ("08:00", "16:00")}, ValidationError),
        ({7: ("08:00", "16:00")}, ValidationError),
        ({"monday": ("08:00", "08:00")}, InvalidTimeRangeError),
        ({"monday": {"start": "08:00"}}, InvalidTimeRangeError),
        ({"monday": "08:00-16:00"}, InvalidTimeRangeError),
        (["monday"], ValidationError),
    ],
)
def test_parse_week_rejects_bad_input(days, error):
    with pytest.raises(error):
        parse_week(days)


def test_schedule_validation():
    service, _ = make_service()
    base = dict(current_role=Role.ADMIN, name="Office", effective_date=MONDAY)

    with pytest.raises(ValidationError):
        service.create_schedule(days=WEEKDAYS_9_TO_5, expires_at=date(2025, 10, 1), **base)
    with pytest.raises(ValidationError):
        service.create_schedule(days={}, **base)
    with pytest.raises(ValidationError):
        service.create_schedule(days=WEEKDAYS_9_TO_5, overtime_threshold=0, **base)
    with pytest.raises(ValidationError):
        service.create_schedule(days=WEEKDAYS_9_TO_5, overtime_threshold="lots", **base)
    with pytest.raises(ValidationError):
        service.create_schedule(days=WEEKDAYS_9_TO_5, status="paused", **base)

    # Drafts may be saved before any day is filled in.
    assert service.create_schedule(days={}, status="draft", **base) == 1


def test_active_schedule_expires_after_its_end_date():
    schedule = WorkSchedule(
        schedule_id=1,
        name="Autumn",
        effective_date=MONDAY,
        expires_at=date(2025, 10, 31),
        days={0: DayShift(start=time(9), end=time(17))},
    )

    assert schedule.shift_for(MONDAY) == DayShift(start=time(9), end=time(17))
    assert schedule.shift_for(date(2025, 10, 7)) is None
    assert schedule.shift_for(date(2025, 9, 29)) is None
    assert schedule.shift_for(date(2025, 11, 3)) is None
    assert schedule.status_on(date(2025, 11, 1)) == ScheduleStatus.EXPIRED


def test_summary_and_status_filter():
    service, _ = make_service()
    for name, status, expires_at in [
        ("Current", "active", None),
        ("Old", "active", date(2025, 12, 31)),
        ("Next", "draft", None),
    ]:
        service.create_schedule(
            current_role=Role.ADMIN, name=name, effective_date=MONDAY, days=WEEKDAYS_9_TO_5, status=status, expires_at=expires_at
        )

    today = date(2026, 1, 15)
    summary = service.summary(today=today)
    assert (summary.total_schedules, summary.active_schedules, summary.expired_schedules, summary.draft_schedules) == (3, 1, 1, 1)
    assert [s.name for s in service.list_schedules(status="expired", today=today)] == ["Old"]


def test_update_keeps_untouched_fields():
    service, repo = make_service()
    sid = service.create_schedule(current_role=Role.ADMIN, name="Office", effective_date=MONDAY, days=WEEKDAYS_9_TO_5)

    updated = service.update_schedule(
        current_role=Role.HR_MANAGER, schedule_id=sid, changes={"days": {"monday": ("07:00", "15:00")}, "description": " Early "}
    )

    assert updated.name == "Office"
    assert updated.description == "Early"
    assert dict(updated.days) == {0: DayShift(start=time(7), end=time(15))}
    assert repo.rows[sid] == updated

    with pytest.raises(ValidationError):
        service.update_schedule(current_role=Role.ADMIN, schedule_id=sid, changes={"days": {}})


def test_delete_and_missing_schedule():
    service, repo = make_service()
    sid = service.create_schedule(current_role=Role.ADMIN, name="Office", effective_date=MONDAY, days=WEEKDAYS_9_TO_5)

    with pytest.raises(AuthorizationError):
        service.delete(current_role=Role.SCHEDULER, schedule_id=sid)
    service.delete(current_role=Role.ADMIN, schedule_id=sid)

    assert repo.rows == {}
    with pytest.raises(NotFoundError):
        service.get(sid)
