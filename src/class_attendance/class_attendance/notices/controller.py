from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.http import api_errors, json_payload, require_class_scope, roles_required
from ..container import Container
from ..core.constants import NOTICE_POLL_SECONDS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError


def register(app: Flask, container: Container) -> None:
    def _viewer_id() -> str:
        user_id = session.get("user_id")
        if not user_id:
            raise AuthorizationError("Sign in to see alerts")
        return str(user_id)

    @app.route("/api/classes/<class_id>/notices", methods=["GET"], endpoint="notices_list")
    @api_errors
    def notices_list(class_id: str):
        notices = container.notification_pipeline.list_notices(class_id)
        return jsonify({"success": True, "notices": [n.to_dict() for n in notices]})

    @app.route("/api/classes/<class_id>/notices", methods=["POST"], endpoint="notices_post")
    @api_errors
    @roles_required(Role.ADMIN, Role.CR)
    def notices_post(class_id: str):
        require_class_scope(container.directory_repo, class_id)
        data = json_payload()
        notice_id = container.notification_pipeline.announce(class_id, data.get("title") or "", data.get("content") or "")
        return jsonify({"success": True, "notice_id": notice_id}), 201

    @app.route("/api/classes/<class_id>/alerts", methods=["GET"], endpoint="alerts_timetable")
    @api_errors
    def alerts_timetable(class_id: str):
        viewer_id = _viewer_id()
        pipeline = container.notification_pipeline
        alert = pipeline.poll(class_id, viewer_id)
        return jsonify(
            {
                "success": True,
                "state": pipeline.alert_state(class_id, viewer_id).value,
                "timetable": alert.to_dict() if alert else None,
                "poll_seconds": NOTICE_POLL_SECONDS,
            }
        )

    @app.route("/api/notices/<int:notice_id>/dismiss", methods=["POST"], endpoint="alerts_dismiss")
    @api_errors
    def alerts_dismiss(notice_id: int):
        container.notification_pipeline.dismiss(_viewer_id(), notice_id)
        return jsonify({"success": True})

    @app.route("/api/students/<student_id>/alerts", methods=["GET"], endpoint="alerts_attendance")
    @api_errors
    def alerts_attendance(student_id: str):
        alert = container.notification_pipeline.low_attendance_alert(student_id)
        return jsonify({"success": True, "attendance": alert.to_dict() if alert else None})
