from flask import Blueprint, jsonify, request
from flask_login import login_required

from iftar.extensions import limiter
from iftar.routes.api.places import strict_limit
from iftar.services import LinkService, MediaService

api_media_bp = Blueprint("api_media", __name__)


@api_media_bp.post("/uploads")
@limiter.limit(strict_limit)
@login_required
def upload_image():
    result = MediaService.upload_image(request.files.get("image"))
    return jsonify(result), 201


@api_media_bp.get("/resolve-link")
@limiter.limit(strict_limit)
def resolve_link():
    return jsonify({"url": LinkService.resolve(request.args.get("url", ""))})
