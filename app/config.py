"""Configuration classes for the Flask application."""

from __future__ import annotations

import os
import secrets


def _load_secret() -> str:
    secret = os.environ.get("CALC_WORKBENCH_SECRET")
    return secret or secrets.token_urlsafe(64)


class BaseConfig:
    SECRET_KEY = _load_secret()
    MAX_CONTENT_LENGTH = 1 * 1024 * 1024  # 1 MiB
    # Pages load only their own scripts, stylesheets and icons.
    RESPONSE_HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "Content-Security-Policy": "default-src 'self'; object-src 'none'; frame-ancestors 'none'",
    }
    LOG_LEVEL = "INFO"


class TestingConfig(BaseConfig):
    TESTING = True
    LOG_LEVEL = "WARNING"


__all__ = ["BaseConfig", "TestingConfig"]
