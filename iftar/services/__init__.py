from iftar.services.geo_service import GeoService
from iftar.services.identity_service import IdentityService
from iftar.services.link_service import LinkService
from iftar.services.media_service import MediaService
from iftar.services.moderation_service import ModerationService
from iftar.services.place_service import PlaceService
from iftar.services.review_service import ReviewService
from iftar.services.seed_service import seed_places_if_empty
from iftar.services.stats_service import StatsService

__all__ = [
    "GeoService",
    "IdentityService",
    "LinkService",
    "MediaService",
    "ModerationService",
    "PlaceService",
    "ReviewService",
    "StatsService",
    "seed_places_if_empty",
]
