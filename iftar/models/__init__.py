from iftar.models.image_submission import PlaceImageSubmission
from iftar.models.place import IMAGE_SLOTS, Place
from iftar.models.review import Review
from iftar.models.user import User

__all__ = [
    "IMAGE_SLOTS",
    "User",
    "Place",
    "Review",
    "PlaceImageSubmission",
]
