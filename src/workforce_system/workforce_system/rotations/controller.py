from __future__ import annotations

from datetime import date, timedelta

from flask import Flask, jsonify

from ..common.http import bool_arg, current_role, date_arg, json_endpoint, optional_date_arg, optional_int_arg, payload
from ..core.constants import DEFAULT_LIST_DAYS
from ..core.exceptions import ValidationError
from ..container import Container
from .engine import PRESET_TEMPLATES, preset_template
from .model import EmployeeRotation


def rotation_to_dict(rotation: EmployeeRotation) -> dict:
    return {
        "rotation_id": rotation.rotation_id,
        "name": rotation.name,
        "description": rotation.description,
        "pattern_type": rotation.pattern_type.value,
        "pattern_json": rotation.pattern.to_json(),
        "department_id": rotation.department_id,
        "start_date": rotation.start_date.isoformat(),
        "end_date": rotation.end_date.isoformat() if rotation.end_date else None,
        "is_active": rotation.is_active,
        "employee_ids": sorted(rotation.employee_ids),
        "assigned_employees_count": len(rotation.employee_ids),
    }


def _custom_pattern(data):
    if data.get("template"):
        return preset_template(str(data["template"]))
    return data.get("pattern")


def register(app: Flask, container: Container) -> None:
    service = container.rotation_service

    @app.route("/admin/rotations", methods=["GET"], endpoint="admin_rotations")
    @json_endpoint
    def admin_rotations():
        rotations = service.list_rotations(active_only=bool_arg(payload(), "active"))
        return jsonify({"success": True, "rotations": [rotation_to_dict(r) for r in rotations]})

    @app.route("/admin/rotations/templates", methods=["GET"], endpoint="admin_rotation_templates")
    @json_endpoint
    def admin_rotation_templates():
        return jsonify({"success": True, "templates": {name: list(flags) for name, flags in PRESET_TEMPLATES.items()}})

    @app.route("/admin/rotations", methods=["POST"], endpoint="admin_rotations_create")
    @json_endpoint
    def admin_rotations_create():
        data = payload()
        rotation_id = service.create_rotation(
            current_role=current_role(),
            name=str(data.get("name") or ""),
            pattern_type=str(data.get("pattern_type") or ""),
            custom_pattern=_custom_pattern(data),
            start_date=date_arg(data, "start_date"),
            end_date=optional_date_arg(data, "end_date"),
            department_id=optional_int_arg(data, "department_id"),
            description=data.get("description"),
        )
        return jsonify({"success": True, "rotation_id": rotation_id}), 201

    @app.route("/admin/rotations/<int:rotation_id>/pattern", methods=["POST"], endpoint="admin_rotations_pattern")
    @json_endpoint
    def admin_rotations_pattern(rotation_id: int):
        data = payload()
        service.replace_pattern(
            current_role=current_role(),
            rotation_id=rotation_id,
            pattern_type=str(data.get("pattern_type") or ""),
            custom_pattern=_custom_pattern(data),
        )
        return jsonify({"success": True})

    @app.route("/admin/rotations/<int:rotation_id>/deactivate", methods=["POST"], endpoint="admin_rotations_deactivate")
    @json_endpoint
    def admin_rotations_deactivate(rotation_id: int):
        service.deactivate(current_role=current_role(), rotation_id=rotation_id)
        return jsonify({"success": True})

    @app.route("/admin/rotations/<int:rotation_id>/employees", methods=["POST"], endpoint="admin_rotations_employees")
    @json_endpoint
    def admin_rotations_employees(rotation_id: int):
        employee_ids = payload().get("employee_ids")
        if not isinstance(employee_ids, list):
            raise ValidationError("employee_ids must be a list")
        count = service.assign_employees(current_role=current_role(), rotation_id=rotation_id, employee_ids=employee_ids)
        return jsonify({"success": True, "assigned": count})

    @app.route("/admin/rotations/<int:rotation_id>/preview", methods=["GET"], endpoint="admin_rotations_preview")
    @json_endpoint
    def admin_rotations_preview(rotation_id: int):
        data = payload()
        start = date_arg(data, "start", date.today())
        end = date_arg(data, "end", start + timedelta(days=DEFAULT_LIST_DAYS * 4 - 1))
        preview = service.preview(rotation_id=rotation_id, start=start, end=end)
        return jsonify(
            {
                "success": True,
                "rotation": rotation_to_dict(preview.rotation),
                "days": [{"date": d.date.isoformat(), "is_work_day": d.is_work_day} for d in preview.days],
                "stats": {
                    "work_days": preview.stats.work_days,
                    "rest_days": preview.stats.rest_days,
                    "coverage_percentage": preview.stats.coverage_percentage,
                },
            }
        )
