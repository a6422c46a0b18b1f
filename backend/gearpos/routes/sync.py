# Overview: Flask API routes for cloud push/pull.

from flask import Blueprint, current_app

from ..services import sync_service
from ..services.register_service import get_register, save_register
from ..services.remote_store import build_remote_store
from . import KNOWN_ERRORS, error_response

sync_bp = Blueprint("sync", __name__, url_prefix="/api/sync")

# Tests and embedders may install a remote store object here
REMOTE_STORE_KEY = "gearpos.remote_store"


def current_remote_store(register):
    """The injected remote store, else one built from settings, else None."""
    injected = current_app.extensions.get(REMOTE_STORE_KEY)
    if injected is not None:
        return injected
    return build_remote_store(register.settings, current_app.config)


def _run(direction: str):
    register = get_register()
    try:
        result = sync_service.sync(direction, register, current_remote_store(register))
        if direction == sync_service.PULL:
            save_register(register)
        return {"result": result.to_dict()}
    except KNOWN_ERRORS as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Cloud %s failed", direction)
        return {"error": "Internal server error"}, 500


@sync_bp.post("/push")
def push():
    """Upsert every local product, variant, customer, sale and sale item to the cloud."""
    return _run(sync_service.PUSH)


@sync_bp.post("/pull")
def pull():
    """Replace local products, customers and sales with the cloud copy."""
    return _run(sync_service.PULL)
