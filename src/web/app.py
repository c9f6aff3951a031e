# src/web/app.py — v1
"""Flask application factory."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from flask import Flask

from passportscan.api import facade
from passportscan.config.settings import Settings
from passportscan.llm.base_client import BaseLLMClient
from passportscan.normalize.normalizer import Normalizer
from passportscan.ocr.base_client import BaseScanClient
from passportscan.web import auth, routes
from passportscan.web.auth import FirebaseSessionVerifier, SessionVerifier
from passportscan.web.guard import install_guard
from passportscan.web.registry import BatchRegistry

logger = logging.getLogger(__name__)


@dataclass
class WebContext:
    """Per-app collaborators, stored in ``app.extensions["passportscan"]``."""

    settings: Settings
    verifier: SessionVerifier
    registry: BatchRegistry
    normalizer: Normalizer
    scan_client_factory: Callable[[], BaseScanClient]
    llm_client: BaseLLMClient | None = None


def create_app(
    settings: Settings | None = None,
    verifier: SessionVerifier | None = None,
    scan_client_factory: Callable[[], BaseScanClient] | None = None,
    normalizer: Normalizer | None = None,
    llm_client: BaseLLMClient | None = None,
) -> Flask:
    settings = settings or Settings()
    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.web_secret_key

    app.extensions["passportscan"] = WebContext(
        settings=settings,
        verifier=verifier or FirebaseSessionVerifier(settings.firebase_credentials_json),
        registry=BatchRegistry(lambda batch_id: facade.build_session(settings, batch_id)),
        normalizer=normalizer or facade.build_normalizer(settings),
        scan_client_factory=scan_client_factory or (lambda: facade.build_scan_client(settings)),
        llm_client=llm_client,
    )

    install_guard(app)
    app.register_blueprint(auth.bp)
    app.register_blueprint(routes.bp)
    app.register_blueprint(routes.pages)
    logger.debug("Web app created (cookie=%s)", settings.session_cookie_name)
    return app
