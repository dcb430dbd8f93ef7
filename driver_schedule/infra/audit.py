from __future__ import annotations

import logging
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from driver_schedule.domain.models import now_utc

logger = logging.getLogger(__name__)

WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}
AUDITED_READ_PATH_KEYWORDS = ("/export",)
AUDIT_CONTEXT_STATE_KEY = "_audit_context"


def _status_outcome(status_code: int) -> str:
    if status_code >= 500:
        return "error"
    if status_code in {401, 403, 404}:
        return "denied"
    if status_code >= 400:
        return "rejected"
    return "success"


def should_audit_request(method: str, path: str) -> bool:
    if method in WRITE_METHODS:
        return True
    return any(keyword in path for keyword in AUDITED_READ_PATH_KEYWORDS)


def set_audit_context(
    request: Request,
    *,
    action: str | None = None,
    detail: dict[str, Any] | None = None,
) -> None:
    context_raw = getattr(request.state, AUDIT_CONTEXT_STATE_KEY, {})
    context = dict(context_raw) if isinstance(context_raw, dict) else {}
    if action is not None:
        context["action"] = action
    if detail:
        merged = dict(context.get("detail") or {})
        merged.update(detail)
        context["detail"] = merged
    setattr(request.state, AUDIT_CONTEXT_STATE_KEY, context)


def build_audit_record(request: Request, status_code: int) -> dict[str, Any]:
    context_raw = getattr(request.state, AUDIT_CONTEXT_STATE_KEY, {})
    context = context_raw if isinstance(context_raw, dict) else {}
    claims = getattr(request.state, "claims", {})
    path = request.url.path
    raw_action = context.get("action")
    route = request.scope.get("route")
    return {
        "ts": now_utc().isoformat(),
        "actor_id": claims.get("sub"),
        "role": claims.get("role"),
        "action": raw_action if isinstance(raw_action, str) else f"{request.method}:{path}",
        "method": request.method,
        "path": path,
        "route": getattr(route, "path", path),
        "status_code": status_code,
        "outcome": _status_outcome(status_code),
        "detail": context.get("detail", {}),
    }


class AuditMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        path = request.url.path
        if path in {"/healthz", "/readyz"}:
            return response
        has_explicit_context = bool(getattr(request.state, AUDIT_CONTEXT_STATE_KEY, {}))
        if not should_audit_request(request.method, path) and not has_explicit_context:
            return response

        record = build_audit_record(request, response.status_code)
        logger.info(
            "audit %s actor=%s status=%s outcome=%s",
            record["action"],
            record["actor_id"],
            record["status_code"],
            record["outcome"],
            extra={"audit": record},
        )
        return response
