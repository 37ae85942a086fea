from flask import current_app

from iftar.errors import ValidationError
from iftar.extensions import db
from iftar.models import Review


class ReviewService:
    @staticmethod
    def _parse_rating(value):
        # JSON booleans are ints in Python; a rating must be a real integer.
        if isinstance(value, bool) or value is None:
            raise ValidationError("rating", "Rating must be an integer between 1 and 5.")
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if not isinstance(value, int) or value < 1 or value > 5:
            raise ValidationError("rating", "Rating must be an integer between 1 and 5.")
        return value

    @staticmethod
    def has_reviewed(user_id, place_id):
        return (
            db.session.query(Review.id).filter_by(user_id=user_id, place_id=place_id).first() is not None
        )

    @staticmethod
    def create_review(payload, place_id, user_id):
        """Insert a review. Callers check ``has_reviewed`` first; the
        (place, user) unique constraint catches anything that races past it."""
        rating = ReviewService._parse_rating(payload.get("rating"))
        comment = payload.get("comment")
        if comment is not None and not isinstance(comment, str):
            raise ValidationError("comment", "Comment must be a string.")

        review = Review(
            place_id=place_id,
            user_id=user_id,
            rating=rating,
            comment=(comment or "").strip() or None,
        )
        db.session.add(review)
        db.session.commit()
        current_app.logger.info("Review %s added to place %s", review.id, place_id)
        return review
