from __future__ import annotations

import os
from html import escape

from fastapi.responses import HTMLResponse
from fastapi.responses import Response
from fastapi.templating import Jinja2Templates

from .env_settings import get_env
from .session import SESSION_COOKIE, SESSION_MAX_AGE, create_session
from .use_case import ChangeOutcome, STATUS_IDLE


templates = Jinja2Templates(directory=os.path.join(os.path.dirname(__file__), "templates"))


def ui_result(ok: bool, message: str) -> dict:
    """UI result shape for HTMX interactions: {"ok": bool, "message": str}."""
    return {"ok": bool(ok), "message": str(message or "")}


def outcome_result(outcome: ChangeOutcome) -> dict:
    if outcome.status == STATUS_IDLE:
        return ui_result(False, "")
    if outcome.ok:
        return ui_result(True, "Your password has been changed.")
    return ui_result(False, f"Sorry, {outcome.message}")


def htmx_alert(result: dict, *, status_code: int = 200) -> HTMLResponse:
    """Return a Bootstrap alert HTML snippet for HTMX swaps."""

    ok = bool(result.get("ok"))
    message = escape(str(result.get("message") or ""))

    # Bootstrap: danger for errors, success for ok, secondary if empty message.
    if not message:
        level = "secondary"
    else:
        level = "success" if ok else "danger"

    parts: list[str] = [f"<div class='alert alert-{level} py-2 mb-0'>"]
    if message:
        parts.append(f"<div>{message}</div>")
    parts.append("</div>")
    return HTMLResponse("".join(parts), status_code=status_code)


def set_session_cookie(resp: Response, payload: dict) -> None:
    """Set signed session cookie."""
    env = get_env()
    token = create_session(payload)
    resp.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=env.cookie_secure,
        samesite="lax",
        max_age=SESSION_MAX_AGE,
    )
