# src/web/guard.py — v1
"""Route guard applied before every request.

Unauthenticated: protected pages redirect to /login, protected API
routes answer 401. Authenticated: auth pages redirect to /dashboard.
"""

from __future__ import annotations

from flask import Flask, jsonify, redirect, request

from passportscan.web.auth import is_authenticated

PROTECTED_PAGES: tuple[str, ...] = ("/dashboard", "/scan")
PROTECTED_API: tuple[str, ...] = ("/api/scan", "/api/batch")
AUTH_PAGES: tuple[str, ...] = ("/login", "/register", "/forgot-password")

LOGIN_PAGE = "/login"
HOME_PAGE = "/dashboard"


def _matches(path: str, prefixes: tuple[str, ...]) -> bool:
    return any(path == prefix or path.startswith(prefix + "/") for prefix in prefixes)


def guard_request():
    path = request.path
    if _matches(path, PROTECTED_API):
        if not is_authenticated():
            return jsonify(error="Unauthorized"), 401
    elif _matches(path, PROTECTED_PAGES):
        if not is_authenticated():
            return redirect(LOGIN_PAGE)
    elif _matches(path, AUTH_PAGES):
        if is_authenticated():
            return redirect(HOME_PAGE)
    return None


def install_guard(app: Flask) -> None:
    app.before_request(guard_request)
