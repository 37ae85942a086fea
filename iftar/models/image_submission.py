from iftar.extensions import db
from iftar.models.base import IDType, isoformat, new_id, utcnow


class PlaceImageSubmission(db.Model):
    __tablename__ = "place_image_submissions"

    id = db.Column(IDType, primary_key=True, default=new_id)
    place_id = db.Column(IDType, db.ForeignKey("places.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = db.Column(db.Text, nullable=False)
    submitted_by = db.Column(IDType, nullable=False, index=True)
    submitted_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    approved = db.Column(db.Boolean, nullable=False, default=False, index=True)
    approved_by = db.Column(IDType, nullable=True)
    approved_at = db.Column(db.DateTime(timezone=True), nullable=True)

    place = db.relationship("Place", back_populates="image_submissions")

    def to_dict(self):
        return {
            "id": self.id,
            "placeId": self.place_id,
            "imageUrl": self.image_url,
            "submittedBy": self.submitted_by,
            "submittedAt": isoformat(self.submitted_at),
            "approved": bool(self.approved),
            "approvedBy": self.approved_by,
            "approvedAt": isoformat(self.approved_at),
        }
