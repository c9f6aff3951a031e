# src/web/auth.py — v1
"""Session/auth boundary: identity-token login, session cookies, logout.

The core never sees session data; the web layer only asks the verifier
whether a cookie is valid before letting a request reach the scan API.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from datetime import timedelta

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials as firebase_credentials
from firebase_admin.exceptions import FirebaseError
from flask import Blueprint, current_app, g, jsonify, request

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)

_FIREBASE_APP_NAME = "passportscan"


class SessionVerifier(ABC):
    """Exchange identity tokens for session cookies and check cookies."""

    @abstractmethod
    def create_session_cookie(self, id_token: str, expires_in: timedelta) -> str:
        """Return a session cookie value; raise if the token is rejected."""

    @abstractmethod
    def verify_session_cookie(self, cookie: str) -> bool:
        """Whether cookie is a valid, unexpired session."""


class FirebaseSessionVerifier(SessionVerifier):
    """Session cookies minted and verified by firebase-admin."""

    def __init__(self, credentials_json: str = "") -> None:
        self._credentials_json = credentials_json
        self._app: firebase_admin.App | None = None

    def _get_app(self) -> firebase_admin.App:
        if self._app is not None:
            return self._app
        try:
            self._app = firebase_admin.get_app(_FIREBASE_APP_NAME)
        except ValueError:
            info = json.loads(self._credentials_json or "{}")
            if "private_key" in info:
                info["private_key"] = info["private_key"].replace("\\n", "\n")
            cred = firebase_credentials.Certificate(info)
            self._app = firebase_admin.initialize_app(cred, name=_FIREBASE_APP_NAME)
        return self._app

    def create_session_cookie(self, id_token: str, expires_in: timedelta) -> str:
        return firebase_auth.create_session_cookie(
            id_token, expires_in=expires_in, app=self._get_app(),
        )

    def verify_session_cookie(self, cookie: str) -> bool:
        try:
            firebase_auth.verify_session_cookie(cookie, app=self._get_app())
        except (FirebaseError, ValueError) as exc:
            logger.debug("Session cookie rejected: %s", exc)
            return False
        return True


def is_authenticated() -> bool:
    """Check the current request's session cookie (memoized per request)."""
    if "authenticated" not in g:
        ctx = current_app.extensions["passportscan"]
        cookie = request.cookies.get(ctx.settings.session_cookie_name)
        g.authenticated = bool(cookie) and ctx.verifier.verify_session_cookie(cookie)
    return g.authenticated


@bp.post("/api/auth/login")
def login():
    ctx = current_app.extensions["passportscan"]
    payload = request.get_json(silent=True) or {}
    id_token = payload.get("idToken")
    if not id_token:
        return jsonify(error="ID token is required"), 400

    max_age = timedelta(days=ctx.settings.session_max_age_days)
    try:
        cookie = ctx.verifier.create_session_cookie(id_token, max_age)
    except Exception as exc:
        logger.warning("Login rejected: %s", exc)
        return jsonify(error="Unauthorized"), 401

    response = jsonify(success=True)
    response.set_cookie(
        ctx.settings.session_cookie_name,
        cookie,
        max_age=int(max_age.total_seconds()),
        httponly=True,
        secure=ctx.settings.session_cookie_secure,
        samesite="Lax",
        path="/",
    )
    return response


@bp.post("/api/auth/logout")
def logout():
    ctx = current_app.extensions["passportscan"]
    response = jsonify(success=True)
    response.delete_cookie(ctx.settings.session_cookie_name, path="/")
    return response
