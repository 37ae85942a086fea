from flask import Blueprint

from iftar.routes.api.admin import api_admin_bp
from iftar.routes.api.auth import api_auth_bp
from iftar.routes.api.media import api_media_bp
from iftar.routes.api.places import api_places_bp

api_bp = Blueprint("api", __name__)
api_bp.register_blueprint(api_auth_bp)
api_bp.register_blueprint(api_media_bp)
api_bp.register_blueprint(api_places_bp, url_prefix="/places")
api_bp.register_blueprint(api_admin_bp, url_prefix="/admin")
