# Overview: Shared helpers for API blueprints (payload parsing, error mapping).

from flask import jsonify, request

from ..services.backup_service import ParseError
from ..services.checkout_service import CheckoutError, EmptyCartError, StockError
from ..services.sync_service import SyncError, SyncNotConfiguredError
from ..validation import ConflictError, NotFoundError, ValidationError

# Most specific first; the first matching class wins
ERROR_STATUS = (
    (ValidationError, 400),
    (ParseError, 400),
    (ConflictError, 409),
    (NotFoundError, 404),
    (StockError, 409),
    (EmptyCartError, 400),
    (CheckoutError, 400),
    (SyncNotConfiguredError, 409),
    (SyncError, 502),
)
KNOWN_ERRORS = tuple(cls for cls, _ in ERROR_STATUS)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON payload")
    return data


def error_response(exc: Exception):
    for cls, status in ERROR_STATUS:
        if isinstance(exc, cls):
            body = {"error": str(exc)}
            details = getattr(exc, "details", None)
            if details:
                body["details"] = details
            return jsonify(body), status
    raise exc
