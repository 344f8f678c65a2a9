from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import format_time
from ..common.http import current_role, date_arg, json_endpoint, optional_date_arg, optional_int_arg, payload
from ..container import Container
from .model import WEEKDAYS, WorkSchedule

_DATE_FIELDS = ("effective_date", "expires_at")
_PLAIN_FIELDS = ("name", "description", "status", "days", "department_id", "lunch_break_minutes", "overtime_threshold")


def schedule_to_dict(schedule: WorkSchedule) -> dict:
    days = {}
    for index, day in enumerate(WEEKDAYS):
        shift = schedule.days.get(index)
        days[day] = {"start": format_time(shift.start), "end": format_time(shift.end)} if shift else None

    return {
        "schedule_id": schedule.schedule_id,
        "name": schedule.name,
        "description": schedule.description,
        "effective_date": schedule.effective_date.isoformat(),
        "expires_at": schedule.expires_at.isoformat() if schedule.expires_at else None,
        "status": schedule.status.value,
        "department_id": schedule.department_id,
        "department_name": schedule.department_name,
        "lunch_break_minutes": schedule.lunch_break_minutes,
        "overtime_threshold": schedule.overtime_threshold,
        "weekly_hours": schedule.weekly_hours,
        "days": days,
    }


def register(app: Flask, container: Container) -> None:
    service = container.schedule_service

    @app.route("/admin/schedules", methods=["GET"], endpoint="admin_schedules")
    @json_endpoint
    def admin_schedules():
        data = payload()
        schedules = service.list_schedules(
            department_id=optional_int_arg(data, "department_id"),
            status=data.get("status") or None,
        )
        summary = service.summary()
        return jsonify(
            {
                "success": True,
                "schedules": [schedule_to_dict(s) for s in schedules],
                "summary": {
                    "total_schedules": summary.total_schedules,
                    "active_schedules": summary.active_schedules,
                    "expired_schedules": summary.expired_schedules,
                    "draft_schedules": summary.draft_schedules,
                },
            }
        )

    @app.route("/admin/schedules/<int:schedule_id>", methods=["GET"], endpoint="admin_schedules_get")
    @json_endpoint
    def admin_schedules_get(schedule_id: int):
        return jsonify({"success": True, "schedule": schedule_to_dict(service.get(schedule_id))})

    @app.route("/admin/schedules", methods=["POST"], endpoint="admin_schedules_create")
    @json_endpoint
    def admin_schedules_create():
        data = payload()
        schedule_id = service.create_schedule(
            current_role=current_role(),
            name=str(data.get("name") or ""),
            effective_date=date_arg(data, "effective_date"),
            expires_at=optional_date_arg(data, "expires_at"),
            days=data.get("days"),
            status=data.get("status") or "active",
            description=data.get("description"),
            department_id=optional_int_arg(data, "department_id"),
            lunch_break_minutes=optional_int_arg(data, "lunch_break_minutes") or 60,
            overtime_threshold=data.get("overtime_threshold") or 8.0,
        )
        return jsonify({"success": True, "schedule_id": schedule_id}), 201

    @app.route("/admin/schedules/<int:schedule_id>", methods=["POST"], endpoint="admin_schedules_update")
    @json_endpoint
    def admin_schedules_update(schedule_id: int):
        data = payload()
        changes = {key: data.get(key) for key in _PLAIN_FIELDS if key in data}
        changes.update({key: optional_date_arg(data, key) for key in _DATE_FIELDS if key in data})
        schedule = service.update_schedule(current_role=current_role(), schedule_id=schedule_id, changes=changes)
        return jsonify({"success": True, "schedule": schedule_to_dict(schedule)})

    @app.route("/admin/schedules/delete/<int:schedule_id>", methods=["POST"], endpoint="admin_schedules_delete")
    @json_endpoint
    def admin_schedules_delete(schedule_id: int):
        service.delete(current_role=current_role(), schedule_id=schedule_id)
        return jsonify({"success": True})
