from __future__ import annotations

import calendar
from dataclasses import asdict
from datetime import date

from flask import Flask, Response, jsonify, send_file

from ..common.http import bool_arg, date_arg, json_endpoint, optional_int_arg, payload
from ..container import Container
from .export import export_csv, export_xlsx
from .model import CoverageReport


def _month_bounds(today: date) -> tuple[date, date]:
    last = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last)


def report_to_dict(report: CoverageReport) -> dict:
    return {
        "period_start": report.period_start.isoformat(),
        "period_end": report.period_end.isoformat(),
        "required_staff_per_day": report.required_staff_per_day,
        "days": [
            {
                "date": d.date.isoformat(),
                "day_of_week": d.day_of_week,
                "assignment_count": d.assignment_count,
                "coverage_percentage": d.coverage_percentage,
                "department_breakdown": dict(d.department_breakdown),
                "conflict_count": d.conflict_count,
                "status": d.status.value,
            }
            for d in report.days
        ],
        "trends": [asdict(t) for t in report.trends],
        "summary": asdict(report.summary),
    }


def register(app: Flask, container: Container) -> None:
    service = container.coverage_service

    def _report() -> CoverageReport:
        data = payload()
        first, last = _month_bounds(date.today())
        return service.build_report(
            start=date_arg(data, "start", first),
            end=date_arg(data, "end", last),
            department_id=optional_int_arg(data, "department_id"),
            required_staff_per_day=optional_int_arg(data, "required_staff"),
            include_empty_days=bool_arg(data, "include_empty_days"),
        )

    @app.route("/admin/coverage", methods=["GET"], endpoint="admin_coverage")
    @json_endpoint
    def admin_coverage():
        return jsonify({"success": True, "report": report_to_dict(_report())})

    @app.route("/admin/coverage/export", methods=["GET"], endpoint="admin_coverage_export")
    @json_endpoint
    def admin_coverage_export():
        report = _report()
        fmt = str(payload().get("format") or "csv").lower()
        filename = f"coverage-{report.period_start.isoformat()}-{report.period_end.isoformat()}"

        if fmt == "xlsx":
            return send_file(
                export_xlsx(report.days),
                mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                as_attachment=True,
                download_name=f"{filename}.xlsx",
            )
        return Response(
            export_csv(report.days),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}.csv"},
        )
