from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, parse_optional_date
from ..common.http import api_errors, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    def _range_args():
        return parse_optional_date(request.args.get("start")), parse_optional_date(request.args.get("end"))

    @app.route("/api/classes/<class_id>/reports/subjects", methods=["GET"], endpoint="report_subjects")
    @api_errors
    def report_subjects(class_id: str):
        start, end = _range_args()
        rows = container.aggregation_service.per_subject_breakdown(class_id, start=start, end=end)
        return jsonify({"success": True, "subjects": [r.to_dict() for r in rows]})

    @app.route("/api/classes/<class_id>/reports/students", methods=["GET"], endpoint="report_students")
    @api_errors
    def report_students(class_id: str):
        start, end = _range_args()
        rows = container.aggregation_service.student_summaries(class_id, start=start, end=end)
        return jsonify({"success": True, "students": [r.to_dict() for r in rows]})

    @app.route("/api/classes/<class_id>/reports/records", methods=["GET"], endpoint="report_class_records")
    @api_errors
    def report_class_records(class_id: str):
        start, end = _range_args()
        report = container.aggregation_service.class_report(class_id, start=start, end=end)
        return jsonify({"success": True, **report.to_dict()})

    @app.route("/api/students/<student_id>/report", methods=["GET"], endpoint="report_student")
    @api_errors
    def report_student(student_id: str):
        start, end = _range_args()
        report = container.aggregation_service.student_report(student_id, start=start, end=end)
        return jsonify({"success": True, **report.to_dict()})

    @app.route("/api/reports/daily", methods=["GET"], endpoint="report_daily")
    @api_errors
    @roles_required(Role.ADMIN)
    def report_daily():
        value = request.args.get("date")
        on_date = parse_iso_date(value) if value else container.clock.now().date()
        overview = container.aggregation_service.daily_overview(on_date)
        return jsonify({"success": True, **overview.to_dict()})
