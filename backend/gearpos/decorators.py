# Overview: Shared-credential access gate and response hardening.

from __future__ import annotations

import base64
import binascii
import hmac

from flask import current_app, jsonify, request

# Endpoints reachable without credentials
PUBLIC_ENDPOINTS = {"system.health", "static"}

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
}


def _credentials_from_header(header: str | None) -> tuple[str, str] | None:
    if not header:
        return None
    scheme, _, encoded = header.partition(" ")
    if scheme != "Basic" or not encoded:
        return None
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password


def basic_auth_ok() -> bool:
    """
    Check the request's Basic credentials against the configured pair.

    The gate is off when BASIC_AUTH_USER is empty.
    """
    expected_user = current_app.config.get("BASIC_AUTH_USER") or ""
    if not expected_user:
        return True
    expected_pass = current_app.config.get("BASIC_AUTH_PASS") or ""
    creds = _credentials_from_header(request.headers.get("Authorization"))
    if creds is None:
        return False
    user_ok = hmac.compare_digest(creds[0].encode("utf-8"), expected_user.encode("utf-8"))
    pass_ok = hmac.compare_digest(creds[1].encode("utf-8"), expected_pass.encode("utf-8"))
    return user_ok and pass_ok


def unauthorized():
    realm = current_app.config.get("STORE_NAME") or "GearPOS"
    response = jsonify({"error": "Authentication required"})
    response.status_code = 401
    response.headers["WWW-Authenticate"] = f'Basic realm="{realm}", charset="UTF-8"'
    return response


def enforce_basic_auth():
    """before_request hook: one credential check per request."""
    if request.endpoint in PUBLIC_ENDPOINTS or request.method == "OPTIONS":
        return None
    if basic_auth_ok():
        return None
    current_app.logger.warning("Rejected unauthenticated request to %s", request.path)
    return unauthorized()


def add_security_headers(response):
    for key, value in SECURITY_HEADERS.items():
        response.headers.setdefault(key, value)
    return response
