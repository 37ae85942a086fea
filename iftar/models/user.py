from flask_login import UserMixin

from iftar.extensions import db
from iftar.models.base import IDType, TimestampMixin, new_id


class User(UserMixin, TimestampMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(IDType, primary_key=True, default=new_id)
    firebase_uid = db.Column(db.String(128), nullable=False, unique=True, index=True)
    email = db.Column(db.String(255), nullable=True, index=True)
    first_name = db.Column(db.String(120), nullable=True)
    last_name = db.Column(db.String(120), nullable=True)
    profile_image_url = db.Column(db.Text, nullable=True)
    is_admin = db.Column(db.Boolean, nullable=False, default=False, index=True)

    places = db.relationship("Place", back_populates="creator", lazy="dynamic")

    def to_dict(self):
        return {
            "id": self.id,
            "firebaseUid": self.firebase_uid,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "profileImageUrl": self.profile_image_url,
            "isAdmin": bool(self.is_admin),
        }
