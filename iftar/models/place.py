from iftar.extensions import db
from iftar.models.base import CreatedAtMixin, IDType, isoformat, new_id

IMAGE_SLOTS = ("image_url_1", "image_url_2", "image_url_3")


class Place(CreatedAtMixin, db.Model):
    __tablename__ = "places"

    id = db.Column(IDType, primary_key=True, default=new_id)
    name = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text, nullable=True)
    location = db.Column(db.Text, nullable=False)
    latitude = db.Column(db.String(32), nullable=True)
    longitude = db.Column(db.String(32), nullable=True)
    created_by = db.Column(IDType, db.ForeignKey("users.id"), nullable=False, index=True)

    image_url_1 = db.Column(db.Text, nullable=True)
    image_url_2 = db.Column(db.Text, nullable=True)
    image_url_3 = db.Column(db.Text, nullable=True)

    approved = db.Column(db.Boolean, nullable=False, default=False, index=True)
    approved_by = db.Column(IDType, nullable=True)
    approved_at = db.Column(db.DateTime(timezone=True), nullable=True, index=True)

    creator = db.relationship("User", back_populates="places")
    reviews = db.relationship(
        "Review",
        back_populates="place",
        cascade="all, delete-orphan",
    )
    image_submissions = db.relationship(
        "PlaceImageSubmission",
        back_populates="place",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.Index("ix_places_approved_created_at", "approved", "created_at"),
        db.CheckConstraint(
            "(approved AND approved_by IS NOT NULL AND approved_at IS NOT NULL)"
            " OR (NOT approved AND approved_by IS NULL AND approved_at IS NULL)",
            name="ck_places_approval_state",
        ),
    )

    @property
    def image_urls(self):
        return [getattr(self, slot) for slot in IMAGE_SLOTS]

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "location": self.location,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "createdBy": self.created_by,
            "createdAt": isoformat(self.created_at),
            "imageUrl1": self.image_url_1,
            "imageUrl2": self.image_url_2,
            "imageUrl3": self.image_url_3,
            "approved": bool(self.approved),
            "approvedBy": self.approved_by,
            "approvedAt": isoformat(self.approved_at),
        }
