import math
from urllib.parse import urlparse

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from iftar.errors import AppError, ConflictError
from iftar.extensions import limiter
from iftar.services import GeoService, PlaceService, ReviewService
from iftar.services.place_service import is_http_url

api_places_bp = Blueprint("api_places", __name__)


def strict_limit():
    return current_app.config["RATELIMIT_STRICT"]


def _allowed_image_hosts():
    hosts = set(current_app.config["ALLOWED_IMAGE_HOSTS"])
    public_url = current_app.config.get("S3_PUBLIC_URL")
    if public_url:
        hosts.add((urlparse(public_url).hostname or "").lower())
    return hosts


def _json_object():
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise AppError("Request body must be a JSON object.", 400)
    return payload


def _query_float(name):
    try:
        return float(request.args.get(name, ""))
    except ValueError:
        return math.nan


@api_places_bp.get("")
def list_places():
    return jsonify(PlaceService.list_approved_places())


@api_places_bp.get("/nearby")
def nearby_places():
    lat = _query_float("lat")
    lng = _query_float("lng")
    if not GeoService.in_uae(lat, lng):
        raise AppError("Invalid or out-of-range coordinates", 400)

    places = PlaceService.list_approved_places()
    return jsonify(GeoService.rank_nearby(places, lat, lng, limit=current_app.config["NEARBY_LIMIT"]))


@api_places_bp.get("/<place_id>")
def get_place(place_id):
    place = PlaceService.get_place_detail(place_id)
    if not place:
        raise AppError("Place not found", 404)
    return jsonify(place)


@api_places_bp.post("")
@limiter.limit(strict_limit)
@login_required
def create_place():
    payload = _json_object()
    place = PlaceService.create_place(payload, creator_id=current_user.id)
    return jsonify(place.to_dict()), 201


@api_places_bp.post("/<place_id>/reviews")
@limiter.limit(strict_limit)
@login_required
def create_review(place_id):
    if not PlaceService.get_place(place_id):
        raise AppError("Place not found", 404)
    if ReviewService.has_reviewed(current_user.id, place_id):
        raise ConflictError("You have already reviewed this place.")

    payload = _json_object()
    review = ReviewService.create_review(payload, place_id=place_id, user_id=current_user.id)
    return jsonify(review.to_dict()), 201


@api_places_bp.post("/<place_id>/images")
@login_required
def submit_image(place_id):
    payload = _json_object()
    image_url = payload.get("imageUrl")
    if not image_url or not isinstance(image_url, str):
        raise AppError("imageUrl is required", 400)

    hostname = (urlparse(image_url).hostname or "").lower()
    if not hostname or not is_http_url(image_url):
        raise AppError("Invalid image URL.", 400)
    if hostname not in _allowed_image_hosts():
        raise AppError("Images must be uploaded via the app's upload tool.", 400)

    place = PlaceService.get_place(place_id)
    if not place:
        raise AppError("Place not found", 404)
    if not place.approved:
        raise AppError("Photos can only be added to approved places.", 400)

    submission = PlaceService.submit_image(place_id, current_user.id, image_url)
    return jsonify(submission.to_dict()), 201
