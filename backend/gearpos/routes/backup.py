# Overview: Flask API routes for JSON backup export/import.

from flask import Blueprint, Response, current_app, request

from ..services import backup_service
from ..services.register_service import get_register, save_register
from . import KNOWN_ERRORS, error_response

backup_bp = Blueprint("backup", __name__, url_prefix="/api/backup")


@backup_bp.get("/export")
def export_backup():
    document = backup_service.export_document(get_register())
    filename = backup_service.backup_filename()
    return Response(
        document,
        mimetype="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@backup_bp.post("/import")
def import_backup():
    """
    Import a backup document (raw JSON body or multipart field "file").

    Each top-level field (settings, products, customers, sales) is optional;
    absent fields are left untouched.
    """
    register = get_register()
    try:
        upload = request.files.get("file")
        text = upload.read() if upload else request.get_data()
        imported = backup_service.import_document(register, text)
        save_register(register)
        return {"imported": imported}
    except KNOWN_ERRORS as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to import backup")
        return {"error": "Internal server error"}, 500
