"""Shared HTTP helpers: response envelope, auth decorator, error mapping."""
from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional, Sequence

import mysql.connector
from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.constants import AUTH_COOKIE_NAME
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError
from ..employees.model import Principal


def envelope(message: str, *, success: bool = True, data: Any = None, errors: Optional[Sequence[dict]] = None) -> dict:
    body: dict = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    if errors:
        body["errors"] = list(errors)
    return body


def ok(data: Any = None, message: str = "OK", status: int = 200):
    return jsonify(envelope(message, data=data)), status


def fail(message: str, status: int, errors: Optional[Sequence[dict]] = None):
    return jsonify(envelope(message, success=False, errors=errors)), status


def current_principal() -> Principal:
    return g.principal


def make_auth_required(auth_service):
    """Build the ``auth_required(*roles)`` decorator bound to an AuthService."""

    def auth_required(*roles: Role):
        allowed = {Role(r) for r in roles}

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                principal = auth_service.verify_token(request.cookies.get(AUTH_COOKIE_NAME))
                if allowed and principal.role not in allowed:
                    names = ", ".join(sorted(r.value for r in allowed))
                    raise AuthorizationError(f"Access denied: Requires one of [{names}] roles")
                g.principal = principal
                return view(*args, **kwargs)

            return wrapper

        return decorator

    return auth_required


def register_error_handlers(app: Flask, logger: logging.Logger) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if e.status_code >= 500:
            logger.error("request failed path=%s error=%s", request.path, e.message)
        return fail(e.message, e.status_code, e.errors)

    @app.errorhandler(mysql.connector.Error)
    def handle_db_error(e: mysql.connector.Error):
        logger.exception("database error path=%s", request.path)
        return fail("Database unavailable", 500)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("unhandled error path=%s", request.path)
        return fail("Server error", 500)
