from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import SESSION_KEY, admin_session, respond, session_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/feedback", methods=["GET"], endpoint="feedback_state")
    def feedback_state():
        admin = admin_session(container)
        return respond(container, admin, {})

    @app.route("/admin/feedback/<notification_id>/dismiss", methods=["POST"], endpoint="feedback_dismiss")
    def feedback_dismiss(notification_id: str):
        admin = admin_session(container)
        dismissed = container.runner.call(admin.feedback.dismiss, notification_id)
        return respond(container, admin, {"dismissed": dismissed})

    @app.route("/admin/logout", methods=["POST"], endpoint="logout")
    def logout():
        sid = session_id(create=False)
        closed = bool(sid) and container.runner.call(container.sessions.close, sid)
        session.pop(SESSION_KEY, None)
        return jsonify({"closed": closed})
