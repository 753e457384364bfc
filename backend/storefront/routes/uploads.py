# Overview: Image CDN settings for the admin product form.

from flask import Blueprint, current_app

from ..decorators import require_admin
from ..services import image_service

uploads_bp = Blueprint("uploads", __name__, url_prefix="/api/admin/uploads")


@uploads_bp.get("/config")
@require_admin
def upload_config_route():
    """
    Settings for direct browser uploads with the unsigned preset.

    Returns 503 when the CDN is not configured.
    """
    config = image_service.upload_config()
    if not config["cloud_name"] or not config["upload_preset"]:
        current_app.logger.warning("Image uploads requested but CLOUDINARY_* is not configured")
        return {"error": "Image uploads are not configured"}, 503
    return config
