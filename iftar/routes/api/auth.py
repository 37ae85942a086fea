from flask import Blueprint, jsonify
from flask_login import current_user, login_required

api_auth_bp = Blueprint("api_auth", __name__)


@api_auth_bp.get("/auth/user")
@login_required
def me():
    return jsonify(current_user.to_dict())


@api_auth_bp.post("/logout")
def api_logout():
    # Firebase sessions live on the client; nothing to clear server side.
    return jsonify({"message": "Logged out successfully"})
