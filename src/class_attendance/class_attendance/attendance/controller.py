from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import format_iso_date
from ..common.web import admin_session, bad_request, date_arg, is_truthy, payload, respond
from ..container import Container
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    run = container.runner.run

    def _state(admin) -> dict:
        svc = admin.attendance
        board = svc.board
        summary = svc.day_summary()
        return {
            "class_id": svc.class_id,
            "date": format_iso_date(svc.session_date) if svc.session_date else None,
            "loaded": board is not None and svc.roster is not None,
            "busy": svc.busy,
            "has_unsynced_changes": svc.board_store.has_unsynced_changes,
            "rows": svc.view(),
            "summary": summary.to_dict() if summary else None,
        }

    @app.route("/admin/classes/<class_id>/attendance", methods=["GET"], endpoint="attendance_board")
    def attendance_board(class_id: str):
        admin = admin_session(container)
        try:
            session_date = date_arg(request.args.get("date"))
            discard = request.args.get("discard")
            run(
                admin.attendance.select_class(
                    class_id,
                    session_date,
                    discard_unsynced=None if discard is None else is_truthy(discard),
                )
            )
        except ValidationError as e:
            return bad_request(e)
        return respond(container, admin, container.runner.call(_state, admin))

    @app.route("/admin/attendance/date", methods=["POST"], endpoint="attendance_date")
    def attendance_date():
        admin = admin_session(container)
        data = payload()
        try:
            discard = data.get("discard")
            run(
                admin.attendance.change_date(
                    date_arg(data.get("date")),
                    discard_unsynced=None if discard is None else is_truthy(discard),
                )
            )
        except ValidationError as e:
            return bad_request(e)
        return respond(container, admin, container.runner.call(_state, admin))

    @app.route("/admin/attendance/toggle", methods=["POST"], endpoint="attendance_toggle")
    def attendance_toggle():
        admin = admin_session(container)
        data = payload()
        try:
            status = AttendanceStatus(data.get("status"))
        except ValueError:
            return bad_request(ValidationError("Invalid attendance status"))
        member_id = str(data.get("member_id") or "")
        if not member_id:
            return bad_request(ValidationError("member_id is required"))

        container.runner.call(admin.attendance.toggle, member_id, status)
        return respond(container, admin, container.runner.call(_state, admin))

    @app.route("/admin/attendance/publish", methods=["POST"], endpoint="attendance_publish")
    def attendance_publish():
        admin = admin_session(container)
        result = run(admin.attendance.publish())
        body = container.runner.call(_state, admin)
        body.update({"ok": result.ok, "written": result.written, "error": str(result.error) if result.error else None})
        return respond(container, admin, body, 200 if result.ok else 409)

    @app.route("/admin/attendance/classes", methods=["GET"], endpoint="attendance_class_statuses")
    def attendance_class_statuses():
        admin = admin_session(container)
        try:
            session_date = date_arg(request.args.get("date"))
        except ValidationError as e:
            return bad_request(e)
        statuses = run(admin.attendance.class_statuses(session_date))
        if statuses is None:
            return respond(container, admin, {"ok": False}, 502)
        return respond(
            container,
            admin,
            {"ok": True, "date": format_iso_date(session_date), "classes": [s.to_dict() for s in statuses]},
        )
