from __future__ import annotations

import uuid
from typing import Any

from flask import jsonify, request, session

from ..common.datetime_utils import parse_iso_date, today_local
from ..core.exceptions import ValidationError

SESSION_KEY = "admin_session_id"


def session_id(*, create: bool = True) -> str | None:
    sid = session.get(SESSION_KEY)
    if sid is None and create:
        sid = uuid.uuid4().hex
        session[SESSION_KEY] = sid
    return sid


def payload() -> dict[str, Any]:
    """JSON body or form fields of the current request."""

    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def date_arg(value: str | None):
    if not value:
        return today_local()
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError("Invalid date, expected YYYY-MM-DD")


def is_truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


def bad_request(e: Exception):
    return jsonify({"error": str(e)}), 400


def admin_session(container):
    """Admin session of the current browser session, opened on first use."""

    return container.runner.call(container.sessions.get_or_open, session_id())


def respond(container, admin, body: dict, status: int = 200):
    """JSON response carrying the session's current feedback state."""

    snapshot = container.runner.call(admin.feedback.snapshot)
    return jsonify({**body, "feedback": snapshot.to_dict()}), status
