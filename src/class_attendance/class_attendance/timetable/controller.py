from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_day, parse_hhmm
from ..common.http import api_errors, json_payload, require_class_scope, roles_required
from ..container import Container
from ..core.constants import LIVE_SESSION_POLL_SECONDS
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    def _optional(data: dict, key: str, parse):
        value = data.get(key)
        if value is None:
            return None
        return parse(value)

    @app.route("/api/classes/<class_id>/timetable", methods=["GET"], endpoint="timetable_list")
    @api_errors
    def timetable_list(class_id: str):
        slots = container.timetable_service.slots_for(class_id)
        return jsonify({"success": True, "slots": [s.to_dict() for s in slots]})

    @app.route("/api/classes/<class_id>/timetable", methods=["POST"], endpoint="timetable_add")
    @api_errors
    @roles_required(Role.ADMIN, Role.CR)
    def timetable_add(class_id: str):
        require_class_scope(container.directory_repo, class_id)
        data = json_payload()
        slot = container.timetable_service.add_slot(
            class_id,
            day=parse_day(data.get("day") or ""),
            subject=data.get("subject") or "",
            instructor=data.get("instructor") or "",
            start_time=parse_hhmm(data.get("start_time") or ""),
            end_time=parse_hhmm(data.get("end_time") or ""),
        )
        return jsonify({"success": True, "slot": slot.to_dict()}), 201

    @app.route("/api/timetable/<int:slot_id>", methods=["PUT", "PATCH"], endpoint="timetable_update")
    @api_errors
    @roles_required(Role.ADMIN, Role.CR)
    def timetable_update(slot_id: int):
        require_class_scope(container.directory_repo, container.timetable_service.get_slot(slot_id).class_id)
        data = json_payload()
        slot = container.timetable_service.update_slot(
            slot_id,
            day=_optional(data, "day", parse_day),
            subject=data.get("subject"),
            instructor=data.get("instructor"),
            start_time=_optional(data, "start_time", parse_hhmm),
            end_time=_optional(data, "end_time", parse_hhmm),
        )
        return jsonify({"success": True, "slot": slot.to_dict()})

    @app.route("/api/timetable/<int:slot_id>", methods=["DELETE"], endpoint="timetable_delete")
    @api_errors
    @roles_required(Role.ADMIN, Role.CR)
    def timetable_delete(slot_id: int):
        require_class_scope(container.directory_repo, container.timetable_service.get_slot(slot_id).class_id)
        container.timetable_service.delete_slot(slot_id)
        return jsonify({"success": True})

    @app.route("/api/classes/<class_id>/live-session", methods=["GET"], endpoint="timetable_live_session")
    @api_errors
    def timetable_live_session(class_id: str):
        now = container.clock.now()
        live = container.session_evaluator.live_slot(class_id, now)
        today = container.session_evaluator.today_schedule(class_id, now)
        return jsonify(
            {
                "success": True,
                "now": now.isoformat(timespec="seconds"),
                "live": live.to_dict() if live else None,
                "today": [e.to_dict() for e in today],
                "poll_seconds": LIVE_SESSION_POLL_SECONDS,
            }
        )
