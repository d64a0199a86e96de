"""Ordered request pipeline for flash sale endpoints.

Each stage takes the RequestContext and either returns None (continue) or a
response (stop). Stages may replace `ctx.view_args` / `ctx.body`. Pipelines
are built once at import; per-app resources (limiter, admin key) are looked
up on `current_app` so several apps can share the blueprint.
"""
from __future__ import annotations

import hmac
import logging
from functools import wraps
from typing import Any, Callable, Dict, Iterable, Optional

from flask import current_app, jsonify, request, session

from ..observability import RATE_LIMITED
from .sanitize import sanitize_value

logger = logging.getLogger(__name__)

LIMITER_EXTENSION = "flash_sale_rate_limiter"


class RequestContext:
    def __init__(self, view_args: Dict[str, Any], body: Any, client_id: str):
        self.view_args = view_args
        self.body = body
        self.client_id = client_id

    @classmethod
    def from_request(cls, view_args: Dict[str, Any]) -> "RequestContext":
        body = request.get_json(silent=True) if request.method in ("POST", "PUT", "PATCH") else None
        return cls(dict(view_args), body, request.remote_addr or "unknown")


Stage = Callable[[RequestContext], Optional[Any]]


def json_error(code: int, error: str, message: str, details: Any = None, **extra):
    payload = {"error": error, "message": message}
    if details is not None:
        payload["details"] = details
    payload.update(extra)
    return jsonify(payload), code


def require_admin(ctx: RequestContext):
    if session.get("is_admin"):
        return None
    admin_key = request.headers.get("X-Admin-Key")
    expected = current_app.config["ADMIN_API_KEY"]
    if admin_key and hmac.compare_digest(admin_key, expected):
        return None
    return json_error(401, "Unauthorized", "Missing or invalid admin key")


def rate_limit(ctx: RequestContext):
    limiter = current_app.extensions[LIMITER_EXTENSION]
    if limiter.is_allowed(ctx.client_id):
        return None
    RATE_LIMITED.inc()
    logger.warning("Rate limit exceeded for %s on %s", ctx.client_id, request.path)
    return json_error(
        429,
        "Too Many Requests",
        "Too many requests, please try again later",
        retryAfter=limiter.retry_after(ctx.client_id),
    )


def sanitize(ctx: RequestContext):
    ctx.view_args = sanitize_value(ctx.view_args)
    if ctx.body is not None:
        ctx.body = sanitize_value(ctx.body)
    return None


class Pipeline:
    def __init__(self, stages: Iterable[Stage]):
        self.stages = list(stages)

    def __call__(self, handler: Callable[[RequestContext], Any]):
        @wraps(handler)
        def wrapped(**view_args):
            ctx = RequestContext.from_request(view_args)
            for stage in self.stages:
                outcome = stage(ctx)
                if outcome is not None:
                    return outcome
            return handler(ctx)
        return wrapped


public_pipeline = Pipeline([rate_limit, sanitize])
admin_pipeline = Pipeline([require_admin, rate_limit, sanitize])
