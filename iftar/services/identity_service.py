import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from flask import current_app

from iftar.errors import AppError
from iftar.extensions import db
from iftar.models import User

FIREBASE_APP_NAME = "iftar"


class IdentityService:
    @staticmethod
    def _firebase_app():
        try:
            return firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            pass

        config = current_app.config
        project_id = config.get("FIREBASE_PROJECT_ID")
        client_email = config.get("FIREBASE_CLIENT_EMAIL")
        private_key = config.get("FIREBASE_PRIVATE_KEY")
        if not project_id or not client_email or not private_key:
            raise AppError("Identity provider is not configured.", 503)

        cred = credentials.Certificate(
            {
                "type": "service_account",
                "project_id": project_id,
                "client_email": client_email,
                "private_key": private_key,
                "token_uri": "https://oauth2.googleapis.com/token",
            }
        )
        return firebase_admin.initialize_app(cred, {"projectId": project_id}, name=FIREBASE_APP_NAME)

    @staticmethod
    def verify_token(id_token):
        decoded = firebase_auth.verify_id_token(id_token, app=IdentityService._firebase_app())
        return {
            "uid": decoded["uid"],
            "email": decoded.get("email"),
            "name": decoded.get("name"),
            "picture": decoded.get("picture"),
        }

    @staticmethod
    def resolve_user(id_token):
        """Verify a bearer token and return the matching local user,
        creating it on first sight."""
        claims = IdentityService.verify_token(id_token)
        user = User.query.filter_by(firebase_uid=claims["uid"]).first()
        if user:
            return user

        name_parts = (claims.get("name") or "").split(" ")
        user = User(
            firebase_uid=claims["uid"],
            email=claims.get("email"),
            first_name=name_parts[0] or None,
            last_name=" ".join(name_parts[1:]) or None,
            profile_image_url=claims.get("picture"),
        )
        db.session.add(user)
        db.session.commit()
        current_app.logger.info("Created local user %s for subject %s", user.id, user.firebase_uid)
        return user

    @staticmethod
    def bearer_token(header_value):
        if not header_value or not header_value.startswith("Bearer "):
            return None
        return header_value[len("Bearer "):].strip() or None
