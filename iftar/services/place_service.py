import math
from collections import defaultdict
from urllib.parse import urlparse

from flask import current_app

from iftar.errors import ValidationError
from iftar.extensions import db
from iftar.models import Place, PlaceImageSubmission, Review
from iftar.services.stats_service import StatsService

IMAGE_FIELDS = ("imageUrl1", "imageUrl2", "imageUrl3")


def is_http_url(value):
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


class PlaceService:
    @staticmethod
    def _required_text(payload, field):
        value = payload.get(field)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(field, f"{field.capitalize()} is required.")
        return value.strip()

    @staticmethod
    def _optional_text(payload, field):
        value = payload.get(field)
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValidationError(field, f"{field.capitalize()} must be a string.")
        return value.strip() or None

    @staticmethod
    def _parse_coordinate(payload, field):
        value = payload.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        if isinstance(value, bool):
            raise ValidationError(field, f"Invalid {field} value.")
        raw = value.strip() if isinstance(value, str) else str(value)
        try:
            number = float(raw)
        except (TypeError, ValueError) as exc:
            raise ValidationError(field, f"Invalid {field} value.") from exc
        if not math.isfinite(number):
            raise ValidationError(field, f"Invalid {field} value.")
        return raw

    @staticmethod
    def _parse_image_url(payload, field):
        value = payload.get(field)
        if value is None or value == "":
            return None
        if not isinstance(value, str) or not is_http_url(value.strip()):
            raise ValidationError(field, "Invalid url")
        return value.strip()

    @staticmethod
    def create_place(payload, creator_id):
        name = PlaceService._required_text(payload, "name")
        location = PlaceService._required_text(payload, "location")
        description = PlaceService._optional_text(payload, "description")
        latitude = PlaceService._parse_coordinate(payload, "latitude")
        longitude = PlaceService._parse_coordinate(payload, "longitude")
        image_urls = [PlaceService._parse_image_url(payload, field) for field in IMAGE_FIELDS]

        place = Place(
            name=name,
            description=description,
            location=location,
            latitude=latitude,
            longitude=longitude,
            created_by=creator_id,
            image_url_1=image_urls[0],
            image_url_2=image_urls[1],
            image_url_3=image_urls[2],
            approved=False,
        )
        db.session.add(place)
        db.session.commit()
        current_app.logger.info("Place %s submitted by %s", place.id, creator_id)
        return place

    @staticmethod
    def get_place(place_id):
        return db.session.get(Place, place_id)

    @staticmethod
    def reviews_by_place(place_ids):
        """Fetch reviews for many places in one query, grouped by place id."""
        grouped = defaultdict(list)
        if not place_ids:
            return grouped
        rows = (
            Review.query.filter(Review.place_id.in_(place_ids))
            .order_by(Review.created_at.desc())
            .all()
        )
        for review in rows:
            grouped[review.place_id].append(review)
        return grouped

    @staticmethod
    def serialize_with_stats(places, shrink=False):
        grouped = PlaceService.reviews_by_place([place.id for place in places])
        items = []
        for place in places:
            data = place.to_dict()
            data.update(StatsService.compute_place_stats(grouped.get(place.id, [])))
            data["reviews"] = []
            if shrink:
                data["imageUrl2"] = None
                data["imageUrl3"] = None
            items.append(data)
        return items

    @staticmethod
    def list_approved_places(limit=None):
        cap = current_app.config["PLACES_LIST_LIMIT"]
        limit = cap if limit is None else max(0, min(int(limit), cap))
        places = (
            Place.query.filter(Place.approved.is_(True))
            .order_by(Place.created_at.desc())
            .limit(limit)
            .all()
        )
        return PlaceService.serialize_with_stats(places, shrink=True)

    @staticmethod
    def list_all_places():
        places = Place.query.order_by(Place.created_at.desc()).all()
        return PlaceService.serialize_with_stats(places, shrink=True)

    @staticmethod
    def list_pending_places():
        places = (
            Place.query.filter(Place.approved.is_(False))
            .order_by(Place.created_at.desc())
            .all()
        )
        return PlaceService.serialize_with_stats(places)

    @staticmethod
    def get_place_detail(place_id):
        place = PlaceService.get_place(place_id)
        if not place:
            return None
        reviews = Review.query.filter_by(place_id=place.id).order_by(Review.created_at.desc()).all()
        data = place.to_dict()
        data.update(StatsService.compute_place_stats(reviews))
        data["reviews"] = [review.to_dict() for review in reviews]
        return data

    @staticmethod
    def submit_image(place_id, user_id, image_url):
        submission = PlaceImageSubmission(place_id=place_id, image_url=image_url, submitted_by=user_id)
        db.session.add(submission)
        db.session.commit()
        current_app.logger.info("Image submission %s queued for place %s", submission.id, place_id)
        return submission

    @staticmethod
    def list_pending_image_submissions():
        rows = (
            db.session.query(PlaceImageSubmission, Place.name, Place.location)
            .join(Place, Place.id == PlaceImageSubmission.place_id)
            .filter(PlaceImageSubmission.approved.is_(False))
            .order_by(PlaceImageSubmission.submitted_at.asc())
            .all()
        )
        items = []
        for submission, place_name, place_location in rows:
            data = submission.to_dict()
            data["placeName"] = place_name
            data["placeLocation"] = place_location
            items.append(data)
        return items
