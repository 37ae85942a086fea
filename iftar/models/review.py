from iftar.extensions import db
from iftar.models.base import CreatedAtMixin, IDType, isoformat, new_id


class Review(CreatedAtMixin, db.Model):
    __tablename__ = "reviews"

    id = db.Column(IDType, primary_key=True, default=new_id)
    place_id = db.Column(IDType, db.ForeignKey("places.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = db.Column(IDType, nullable=False, index=True)
    rating = db.Column(db.SmallInteger, nullable=False)
    comment = db.Column(db.Text, nullable=True)

    place = db.relationship("Place", back_populates="reviews")

    __table_args__ = (
        db.UniqueConstraint("place_id", "user_id", name="uq_review_place_user"),
        db.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating_range"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "placeId": self.place_id,
            "userId": self.user_id,
            "rating": self.rating,
            "comment": self.comment,
            "createdAt": isoformat(self.created_at),
        }
