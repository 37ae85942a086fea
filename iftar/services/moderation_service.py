from flask import current_app

from iftar.extensions import db
from iftar.models import IMAGE_SLOTS, Place, PlaceImageSubmission
from iftar.models.base import utcnow


class ModerationService:
    """Approval and rejection of places and photo submissions.

    Missing rows are reported as ``None``/``False`` rather than raised; each
    operation commits once so a failure part-way leaves nothing behind.
    """

    @staticmethod
    def approve_place(place_id, admin_id):
        place = db.session.get(Place, place_id)
        if not place:
            return None

        creator_id = place.created_by
        direct_images = [url for url in place.image_urls if url]

        try:
            place.approved = True
            place.approved_by = admin_id
            place.approved_at = utcnow()
            for slot in IMAGE_SLOTS:
                setattr(place, slot, None)

            # Creation-time photos go through the same review queue as any
            # other photo, still credited to the person who added the place.
            for url in direct_images:
                db.session.add(
                    PlaceImageSubmission(place_id=place.id, image_url=url, submitted_by=creator_id)
                )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(
            "Place %s approved by %s; %d image(s) queued for review", place.id, admin_id, len(direct_images)
        )
        return place

    @staticmethod
    def reject_place(place_id):
        place = db.session.get(Place, place_id)
        if not place:
            return False
        try:
            db.session.delete(place)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        current_app.logger.info("Place %s rejected and deleted", place_id)
        return True

    @staticmethod
    def approve_image_submission(submission_id, admin_id):
        """Approve a photo and show it in the first empty slot of its place.

        A URL the place already displays is not copied into a second slot, and
        a place with all three slots taken keeps its photos unchanged.
        """
        submission = db.session.get(PlaceImageSubmission, submission_id)
        if not submission:
            return None

        try:
            submission.approved = True
            submission.approved_by = admin_id
            submission.approved_at = utcnow()

            place = db.session.get(Place, submission.place_id)
            if place and submission.image_url not in place.image_urls:
                empty_slot = next((slot for slot in IMAGE_SLOTS if getattr(place, slot) is None), None)
                if empty_slot:
                    setattr(place, empty_slot, submission.image_url)
                else:
                    current_app.logger.info(
                        "Place %s has no free image slot; submission %s approved but not displayed",
                        place.id,
                        submission.id,
                    )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return submission

    @staticmethod
    def reject_image_submission(submission_id):
        submission = db.session.get(PlaceImageSubmission, submission_id)
        if not submission:
            return False
        db.session.delete(submission)
        db.session.commit()
        return True
