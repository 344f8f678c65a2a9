from __future__ import annotations

from datetime import date, timedelta

from flask import Flask, jsonify

from ..common.datetime_utils import format_time
from ..common.http import bool_arg, current_role, date_arg, json_endpoint, optional_int_arg, payload
from ..core.constants import DEFAULT_LIST_DAYS
from ..core.exceptions import ValidationError
from ..container import Container
from .model import ShiftAssignment
from .service import AssignmentOutcome, NewShiftAssignment


def assignment_to_dict(a: ShiftAssignment) -> dict:
    return {
        "assignment_id": a.assignment_id,
        "employee_id": a.employee_id,
        "employee_name": a.employee_name,
        "date": a.date.isoformat(),
        "shift_start": format_time(a.shift_start),
        "shift_end": format_time(a.shift_end),
        "shift_type": a.shift_type.value,
        "status": a.status.value,
        "department_id": a.department_id,
        "department_name": a.department_name,
        "location": a.location,
        "notes": a.notes,
        "is_overtime": a.is_overtime,
        "overtime_hours": a.overtime_hours,
        "has_conflict": a.has_conflict,
        "conflict_reason": a.conflict_reason,
    }


def outcome_to_dict(outcome: AssignmentOutcome) -> dict:
    return {
        "employee_id": outcome.employee_id,
        "date": outcome.work_date.isoformat(),
        "created": outcome.created,
        "assignment_id": outcome.assignment_id,
        "conflict": outcome.conflict.to_dict(),
    }


def _new_assignment(data) -> NewShiftAssignment:
    return NewShiftAssignment(
        employee_id=optional_int_arg(data, "employee_id") or 0,
        work_date=date_arg(data, "date"),
        shift_start=str(data.get("shift_start") or ""),
        shift_end=str(data.get("shift_end") or ""),
        shift_type=data.get("shift_type") or None,
        department_id=optional_int_arg(data, "department_id"),
        location=data.get("location"),
        notes=data.get("notes"),
        is_overtime=bool_arg(data, "is_overtime"),
    )


def register(app: Flask, container: Container) -> None:
    service = container.assignment_service

    @app.route("/admin/assignments", methods=["GET"], endpoint="admin_assignments")
    @json_endpoint
    def admin_assignments():
        data = payload()
        start = date_arg(data, "start", date.today())
        end = date_arg(data, "end", start + timedelta(days=DEFAULT_LIST_DAYS))
        rows = service.list_assignments(
            start=start,
            end=end,
            employee_id=optional_int_arg(data, "employee_id"),
            department_id=optional_int_arg(data, "department_id"),
        )
        return jsonify({"success": True, "assignments": [assignment_to_dict(a) for a in rows]})

    @app.route("/admin/assignments/check", methods=["POST"], endpoint="admin_assignments_check")
    @json_endpoint
    def admin_assignments_check():
        data = payload()
        conflict = service.check_conflicts(
            employee_id=optional_int_arg(data, "employee_id") or 0,
            work_date=date_arg(data, "date"),
            shift_start=str(data.get("shift_start") or ""),
            shift_end=str(data.get("shift_end") or ""),
            exclude_assignment_id=optional_int_arg(data, "exclude_assignment_id"),
        )
        return jsonify({"success": True, "conflict": conflict.to_dict()})

    @app.route("/admin/assignments", methods=["POST"], endpoint="admin_assignments_create")
    @json_endpoint
    def admin_assignments_create():
        data = payload()
        outcome = service.create(current_role=current_role(), new=_new_assignment(data), override=bool_arg(data, "override"))
        status = 201 if outcome.created else 409
        return jsonify({"success": outcome.created, **outcome_to_dict(outcome)}), status

    @app.route("/admin/assignments/bulk", methods=["POST"], endpoint="admin_assignments_bulk")
    @json_endpoint
    def admin_assignments_bulk():
        data = payload()
        employee_ids = data.get("employee_ids")
        if not isinstance(employee_ids, list):
            raise ValidationError("employee_ids must be a list")

        result = service.bulk_assign(
            current_role=current_role(),
            employee_ids=employee_ids,
            date_from=date_arg(data, "date_from"),
            date_to=date_arg(data, "date_to"),
            shift_start=data.get("shift_start") or None,
            shift_end=data.get("shift_end") or None,
            schedule_id=optional_int_arg(data, "schedule_id"),
            shift_type=data.get("shift_type") or None,
            department_id=optional_int_arg(data, "department_id"),
            location=data.get("location"),
            notes=data.get("notes"),
            skip_rest_days=bool_arg(data, "skip_rest_days"),
            override=bool_arg(data, "override"),
        )
        return jsonify(
            {
                "success": True,
                "created": len(result.created),
                "blocked": len(result.blocked),
                "conflicts": result.conflict_count,
                "skipped_rest_days": result.skipped_rest_days,
                "skipped_off_days": result.skipped_off_days,
                "outcomes": [outcome_to_dict(o) for o in result.outcomes],
            }
        )

    @app.route("/admin/assignments/<int:assignment_id>", methods=["POST"], endpoint="admin_assignments_update")
    @json_endpoint
    def admin_assignments_update(assignment_id: int):
        data = payload()
        outcome = service.update(
            current_role=current_role(),
            assignment_id=assignment_id,
            changes=_new_assignment(data),
            override=bool_arg(data, "override"),
        )
        return jsonify({"success": outcome.created, **outcome_to_dict(outcome)}), (200 if outcome.created else 409)

    @app.route("/admin/assignments/<int:assignment_id>/cancel", methods=["POST"], endpoint="admin_assignments_cancel")
    @json_endpoint
    def admin_assignments_cancel(assignment_id: int):
        service.cancel(current_role=current_role(), assignment_id=assignment_id)
        return jsonify({"success": True})

    @app.route("/admin/assignments/<int:assignment_id>/status", methods=["POST"], endpoint="admin_assignments_status")
    @json_endpoint
    def admin_assignments_status(assignment_id: int):
        service.set_status(
            current_role=current_role(),
            assignment_id=assignment_id,
            status=str(payload().get("status") or ""),
        )
        return jsonify({"success": True})

    @app.route("/admin/assignments/<int:assignment_id>/overtime", methods=["POST"], endpoint="admin_assignments_overtime")
    @json_endpoint
    def admin_assignments_overtime(assignment_id: int):
        data = payload()
        hours = data.get("hours")
        try:
            hours = float(hours) if hours not in (None, "") else None
        except (TypeError, ValueError):
            raise ValidationError("hours must be a number")

        is_overtime = bool_arg(data, "is_overtime") if "is_overtime" in data else True
        service.mark_overtime(current_role=current_role(), assignment_id=assignment_id, is_overtime=is_overtime, hours=hours)
        return jsonify({"success": True})

    @app.route("/admin/assignments/delete/<int:assignment_id>", methods=["POST"], endpoint="admin_assignments_delete")
    @json_endpoint
    def admin_assignments_delete(assignment_id: int):
        service.delete(current_role=current_role(), assignment_id=assignment_id)
        return jsonify({"success": True})
