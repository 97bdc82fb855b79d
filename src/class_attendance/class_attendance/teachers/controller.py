from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_session, bad_request, is_truthy, payload, respond
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    run = container.runner.run

    @app.route("/admin/teachers", methods=["GET"], endpoint="teachers_list")
    def teachers_list():
        admin = admin_session(container)
        class_name = request.args.get("class_name")
        if class_name:
            teachers = run(admin.teachers.list_assigned(class_name))
        else:
            teachers = run(admin.teachers.list_candidates())
        return respond(container, admin, {"teachers": [t.to_dict() for t in teachers]})

    @app.route("/admin/teachers/<teacher_id>/assign", methods=["POST"], endpoint="teacher_assign")
    def teacher_assign(teacher_id: str):
        admin = admin_session(container)
        try:
            ok = run(admin.teachers.assign(teacher_id, str(payload().get("class_name") or "")))
        except ValidationError as e:
            return bad_request(e)
        return respond(container, admin, {"ok": ok}, 200 if ok else 502)

    @app.route("/admin/teachers/<teacher_id>/unassign", methods=["POST"], endpoint="teacher_unassign")
    def teacher_unassign(teacher_id: str):
        admin = admin_session(container)
        confirmed = is_truthy(payload().get("confirm"))
        try:
            ok = run(admin.teachers.unassign(teacher_id, confirm=lambda _prompt: confirmed))
        except ValidationError as e:
            return bad_request(e)
        if not confirmed:
            return respond(container, admin, {"ok": False, "confirmation_required": True}, 428)
        return respond(container, admin, {"ok": ok}, 200 if ok else 502)
