from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_session, bad_request, payload, respond
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    run = container.runner.run

    @app.route("/admin/classes/<class_id>", methods=["POST"], endpoint="class_update")
    def class_update(class_id: str):
        admin = admin_session(container)
        try:
            ok = run(admin.classes.update_details(class_id, payload()))
        except ValidationError as e:
            return bad_request(e)
        return respond(container, admin, {"ok": ok}, 200 if ok else 502)

    @app.route("/admin/classes/<class_id>/delete", methods=["POST"], endpoint="class_delete")
    def class_delete(class_id: str):
        admin = admin_session(container)
        try:
            result = run(admin.classes.delete_class(class_id))
        except ValidationError as e:
            return bad_request(e)
        return respond(container, admin, result.to_dict(), 200 if result.ok else 502)

    @app.route("/admin/classes/<class_id>/delete/retry", methods=["POST"], endpoint="class_delete_retry")
    def class_delete_retry(class_id: str):
        admin = admin_session(container)
        pending = container.runner.call(admin.classes.pending_cascade, class_id)
        if pending is None:
            return jsonify({"error": "Nothing to retry for this class"}), 404
        result = run(admin.classes.retry_cascade(pending))
        return respond(container, admin, result.to_dict(), 200 if result.ok else 502)
