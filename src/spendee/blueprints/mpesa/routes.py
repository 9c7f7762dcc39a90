"""M-Pesa statement upload routes."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import ValidationError
from ...extensions import get_context
from ...security import current_user_id, login_required
from ...services import mpesa as service
from . import bp


@bp.post("/upload-statement")
@login_required
def upload_statement():
    upload = request.files.get("file")
    if upload is None:
        raise ValidationError("No file uploaded", errors={"file": ["Choose a PDF statement"]})
    result = service.import_statement(
        get_context(),
        user_id=current_user_id(),
        filename=upload.filename,
        payload=upload.read(),
    )
    return jsonify(result.as_dict())


@bp.get("/upload-info")
@login_required
def upload_info():
    return jsonify(
        {
            "maxFileSize": "10MB",
            "supportedFormats": list(service.SUPPORTED_FORMATS),
            "instructions": list(service.UPLOAD_INSTRUCTIONS),
        }
    )
