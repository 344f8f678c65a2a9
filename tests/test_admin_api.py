from __future__ import annotations

from types import SimpleNamespace

import pytest
from flask import Flask

from src.workforce_system.workforce_system.assignments.controller import register as register_assignments
from src.workforce_system.workforce_system.assignments.model import ShiftAssignment
from src.workforce_system.workforce_system.assignments.detector import ConflictDetector
from src.workforce_system.workforce_system.assignments.service import AssignmentService
from src.workforce_system.workforce_system.coverage.controller import register as register_coverage
from src.workforce_system.workforce_system.coverage.service import CoverageService
from src.workforce_system.workforce_system.rotations.controller import register as register_rotations
from src.workforce_system.workforce_system.rotations.model import EmployeeRotation
from src.workforce_system.workforce_system.rotations.service import RotationService
from src.workforce_system.workforce_system.schedules.controller import register as register_schedules
from src.workforce_system.workforce_system.schedules.model import WorkSchedule
from src.workforce_system.workforce_system.schedules.service import ScheduleService


class FakeAssignmentsRepo:
    def __init__(self):
        self.rows: dict[int, ShiftAssignment] = {}

    def get_by_id(self, assignment_id):
        return self.rows.get(int(assignment_id))

    def list_range(self, *, start, end, employee_id=None, department_id=None):
        return [
            a
            for a in self.rows.values()
            if start <= a.date <= end and (employee_id is None or a.employee_id == employee_id)
        ]

    def create(self, *, employee_id, work_date, shift_start, shift_end, shift_type, **fields):
        aid = len(self.rows) + 1
        self.rows[aid] = ShiftAssignment(
            assignment_id=aid,
            employee_id=employee_id,
            date=work_date,
            shift_start=shift_start,
            shift_end=shift_end,
            shift_type=shift_type,
            **fields,
        )
        return aid


class FakeAvailability:
    def get_unavailability(self, *, employee_id, work_date):
        return None


class FakeRotationRepo:
    def __init__(self):
        self.rows: dict[int, EmployeeRotation] = {}

    def get_by_id(self, rotation_id):
        return self.rows.get(int(rotation_id))

    def get_active_for_employee(self, employee_id):
        return None

    def create(self, *, name, pattern_type, pattern, start_date, end_date=None, department_id=None, description=None):
        rid = len(self.rows) + 1
        self.rows[rid] = EmployeeRotation(
            rotation_id=rid, name=name, pattern_type=pattern_type, pattern=pattern, start_date=start_date, end_date=end_date
        )
        return rid


class FakeScheduleRepo:
    def __init__(self):
        self.rows: dict[int, WorkSchedule] = {}

    def list_all(self, *, department_id=None):
        return [s for s in self.rows.values() if department_id is None or s.department_id == department_id]

    def get_by_id(self, schedule_id):
        return self.rows.get(int(schedule_id))

    def create(self, **fields):
        sid = len(self.rows) + 1
        self.rows[sid] = WorkSchedule(schedule_id=sid, **fields)
        return sid


@pytest.fixture()
def client():
    rotations_repo = FakeRotationRepo()
    schedules_repo = FakeScheduleRepo()
    assignment_service = AssignmentService(
        FakeAssignmentsRepo(),
        detector=ConflictDetector(),
        availability=FakeAvailability(),
        rotations=rotations_repo,
        schedules=schedules_repo,
    )
    container = SimpleNamespace(
        rotation_service=RotationService(rotations_repo),
        schedule_service=ScheduleService(schedules_repo),
        assignment_service=assignment_service,
        coverage_service=CoverageService(assignment_service),
    )

    app = Flask(__name__)
    app.secret_key = "test"
    register_rotations(app, container)
    register_schedules(app, container)
    register_assignments(app, container)
    register_coverage(app, container)
    return app.test_client()


def login(client, role):
    with client.session_transaction() as sess:
        sess["user_id"] = 1
        sess["role"] = role


SHIFT = {"employee_id": 7, "date": "2025-10-06", "shift_start": "08:00", "shift_end": "16:00"}


def test_requires_login(client):
    assert client.get("/admin/assignments").status_code == 401


def test_rotation_create_and_preview(client):
    login(client, "hr_manager")
    resp = client.post(
        "/admin/rotations", json={"name": "Support", "pattern_type": "custom", "template": "3x2x2", "start_date": "2026-01-05"}
    )
    assert resp.status_code == 201
    rotation_id = resp.get_json()["rotation_id"]

    resp = client.get(f"/admin/rotations/{rotation_id}/preview?start=2026-01-05&end=2026-01-13")
    body = resp.get_json()
    assert [d["is_work_day"] for d in body["days"]] == [True, True, True, False, False, True, True, False, False]
    assert body["stats"]["work_days"] == 5


def test_invalid_pattern_is_a_bad_request(client):
    login(client, "admin")
    resp = client.post(
        "/admin/rotations", json={"name": "Bad", "pattern_type": "custom", "pattern": [1, 2], "start_date": "2026-01-05"}
    )
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_staff_is_forbidden(client):
    login(client, "staff")
    assert client.post("/admin/assignments", json=SHIFT).status_code == 403


def test_missing_rotation_is_not_found(client):
    login(client, "admin")
    assert client.post("/admin/rotations/42/deactivate").status_code == 404


def test_overlap_is_reported_as_conflict(client):
    login(client, "scheduler")
    assert client.post("/admin/assignments", json=SHIFT).status_code == 201

    resp = client.post("/admin/assignments", json={**SHIFT, "shift_start": "15:00", "shift_end": "23:00"})
    body = resp.get_json()
    assert resp.status_code == 409
    assert body["created"] is False
    assert body["conflict"]["type"] == "overlap"
    assert body["conflict"]["conflicting_shift"]["shift_start"] == "08:00"

    check = client.post("/admin/assignments/check", json={**SHIFT, "shift_start": "16:00", "shift_end": "23:00"})
    assert check.get_json()["conflict"]["type"] == "none"


def test_malformed_time_is_a_bad_request(client):
    login(client, "scheduler")
    resp = client.post("/admin/assignments", json={**SHIFT, "shift_end": "late"})
    assert resp.status_code == 400


def test_coverage_report_and_csv_export(client):
    login(client, "scheduler")
    client.post("/admin/assignments", json=SHIFT)

    resp = client.get("/admin/coverage?start=2025-10-06&end=2025-10-06&required_staff=1")
    report = resp.get_json()["report"]
    assert report["days"][0]["status"] == "overstaffed"
    assert report["summary"]["total_days"] == 1

    export = client.get("/admin/coverage/export?start=2025-10-06&end=2025-10-06&required_staff=1")
    assert export.mimetype == "text/csv"
    assert export.get_data(as_text=True).splitlines()[1] == "2025-10-06,Mon,1,100,overstaffed,0"


def test_schedule_drives_bulk_assignment(client):
    login(client, "scheduler")
    week = {"monday": {"start": "08:00", "end": "16:00"}, "tuesday": ["14:00", "22:00"]}
    assert client.post("/admin/schedules", json={"name": "Ops", "effective_date": "2025-10-06", "days": week}).status_code == 403

    login(client, "hr_manager")
    resp = client.post("/admin/schedules", json={"name": "Ops", "effective_date": "2025-10-06", "days": week})
    assert resp.status_code == 201
    schedule_id = resp.get_json()["schedule_id"]

    body = client.get(f"/admin/schedules/{schedule_id}").get_json()["schedule"]
    assert body["days"]["tuesday"] == {"start": "14:00", "end": "22:00"}
    assert body["days"]["sunday"] is None
    assert body["weekly_hours"] == 16.0

    login(client, "scheduler")
    resp = client.post(
        "/admin/assignments/bulk",
        json={"employee_ids": [7], "date_from": "2025-10-06", "date_to": "2025-10-08", "schedule_id": schedule_id},
    )
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["created"] == 2
    assert body["skipped_off_days"] == 1

    listing = client.get("/admin/schedules").get_json()
    assert listing["summary"]["active_schedules"] == 1
    assert client.get("/admin/schedules/99").status_code == 404


def test_schedule_with_unknown_weekday_is_a_bad_request(client):
    login(client, "admin")
    resp = client.post(
        "/admin/schedules", json={"name": "Bad", "effective_date": "2025-10-06", "days": {"funday": ["08:00", "16:00"]}}
    )
    assert resp.status_code == 400
