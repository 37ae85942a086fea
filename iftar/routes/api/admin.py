from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from iftar.decorators import admin_required
from iftar.errors import AppError
from iftar.services import ModerationService, PlaceService, StatsService

api_admin_bp = Blueprint("api_admin", __name__)


@api_admin_bp.get("/places")
@login_required
@admin_required
def all_places():
    return jsonify(PlaceService.list_all_places())


@api_admin_bp.get("/places/pending")
@login_required
@admin_required
def pending_places():
    return jsonify(PlaceService.list_pending_places())


@api_admin_bp.patch("/places/<place_id>/approve")
@login_required
@admin_required
def approve_place(place_id):
    place = ModerationService.approve_place(place_id, admin_id=current_user.id)
    if not place:
        raise AppError("Place not found", 404)
    return jsonify(place.to_dict())


@api_admin_bp.delete("/places/<place_id>/reject")
@login_required
@admin_required
def reject_place(place_id):
    if not ModerationService.reject_place(place_id):
        raise AppError("Place not found", 404)
    return jsonify({"message": "Place rejected and deleted"})


@api_admin_bp.get("/stats")
@login_required
@admin_required
def stats():
    return jsonify(StatsService.compute_admin_stats())


@api_admin_bp.get("/images/pending")
@login_required
@admin_required
def pending_images():
    return jsonify(PlaceService.list_pending_image_submissions())


@api_admin_bp.patch("/images/<submission_id>/approve")
@login_required
@admin_required
def approve_image(submission_id):
    submission = ModerationService.approve_image_submission(submission_id, admin_id=current_user.id)
    if not submission:
        raise AppError("Submission not found", 404)
    return jsonify(submission.to_dict())


@api_admin_bp.delete("/images/<submission_id>/reject")
@login_required
@admin_required
def reject_image(submission_id):
    if not ModerationService.reject_image_submission(submission_id):
        raise AppError("Submission not found", 404)
    return jsonify({"message": "Image submission rejected"})
