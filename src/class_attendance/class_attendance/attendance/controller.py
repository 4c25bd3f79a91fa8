from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, parse_optional_date
from ..common.http import api_errors, json_payload, require_class_scope, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import Mark


def register(app: Flask, container: Container) -> None:
    def _date_or_today(value) -> date:
        if value:
            return parse_iso_date(str(value))
        return container.clock.now().date()

    def _parse_marks(items) -> list[Mark]:
        if not isinstance(items, list):
            raise ValidationError("records must be a list of {student_id, present}")
        marks = []
        for item in items:
            if not isinstance(item, dict) or not item.get("student_id"):
                raise ValidationError("Each record needs a student_id")
            present = item.get("present")
            if not isinstance(present, bool):
                raise ValidationError(f"present must be true or false for student {item['student_id']}")
            marks.append(Mark(student_id=str(item["student_id"]), present=present))
        return marks

    def _range_args():
        return parse_optional_date(request.args.get("start")), parse_optional_date(request.args.get("end"))

    @app.route("/api/classes/<class_id>/attendance/authorize", methods=["GET"], endpoint="attendance_authorize")
    @api_errors
    def attendance_authorize(class_id: str):
        decision = container.attendance_gate.authorize_mark(
            class_id,
            request.args.get("subject") or "",
            _date_or_today(request.args.get("date")),
        )
        return jsonify({"success": True, **decision.to_dict()})

    @app.route("/api/classes/<class_id>/attendance", methods=["POST"], endpoint="attendance_commit")
    @api_errors
    @roles_required(Role.ADMIN, Role.CR)
    def attendance_commit(class_id: str):
        require_class_scope(container.directory_repo, class_id)
        data = json_payload()
        on_date = _date_or_today(data.get("date"))
        written = container.attendance_ledger.commit(
            class_id,
            _parse_marks(data.get("records")),
            on_date,
            data.get("subject") or "",
        )
        return jsonify({"success": True, "written": written, "date": on_date.isoformat()}), 201

    @app.route("/api/classes/<class_id>/attendance", methods=["GET"], endpoint="attendance_for_class")
    @api_errors
    def attendance_for_class(class_id: str):
        start, end = _range_args()
        records = container.attendance_ledger.records_for_class(class_id, start=start, end=end)
        return jsonify({"success": True, "records": [r.to_dict() for r in records]})

    @app.route("/api/students/<student_id>/attendance", methods=["GET"], endpoint="attendance_for_student")
    @api_errors
    def attendance_for_student(student_id: str):
        start, end = _range_args()
        records = container.attendance_ledger.records_for_student(student_id, start=start, end=end)
        return jsonify(
            {
                "success": True,
                "records": [r.to_dict() for r in records],
                "percentage": container.aggregation_service.percentage(records),
            }
        )
