from __future__ import annotations

from flask import Flask

from ..common.web import admin_session, bad_request, payload, respond
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    run = container.runner.run

    @app.route("/admin/classes/<class_id>/students", methods=["POST"], endpoint="student_enroll")
    def student_enroll(class_id: str):
        admin = admin_session(container)
        try:
            student = run(admin.students.enroll(class_id, payload()))
        except ValidationError as e:
            return bad_request(e)
        if student is None:
            return respond(container, admin, {"ok": False}, 502)
        return respond(container, admin, {"ok": True, "id": student.student_id, "name": student.full_name}, 201)

    @app.route("/admin/students/<student_id>", methods=["POST"], endpoint="student_update")
    def student_update(student_id: str):
        admin = admin_session(container)
        try:
            ok = run(admin.students.update(student_id, payload()))
        except ValidationError as e:
            return bad_request(e)
        return respond(container, admin, {"ok": ok}, 200 if ok else 502)
