# Overview: Flask API routes for store settings.

from flask import Blueprint, current_app

from ..services.register_service import get_register, save_register
from ..services.settings_service import PAYMENT_PROFILES, apply_settings_patch
from . import KNOWN_ERRORS, error_response, json_body

settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")


def _settings_payload(settings) -> dict:
    return {
        "settings": settings.to_dict(redact=True),
        "paymentMethods": list(settings.payment_methods),
        "paymentProfiles": {k: list(v) for k, v in PAYMENT_PROFILES.items()},
    }


@settings_bp.get("")
def get_settings():
    return _settings_payload(get_register().settings)


@settings_bp.patch("")
def update_settings():
    """
    Update store settings.

    JSON fields (all optional): storeName, currency, taxRateDefault,
    lowStockThreshold, supabaseUrl, supabaseAnonKey, paymentProfile
    """
    register = get_register()
    try:
        patch = json_body()
        with register.lock:
            register.settings = apply_settings_patch(register.settings, patch)
        save_register(register)
        return _settings_payload(register.settings)
    except KNOWN_ERRORS as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update settings")
        return {"error": "Internal server error"}, 500
