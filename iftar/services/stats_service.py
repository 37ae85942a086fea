from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from iftar.models import Place, PlaceImageSubmission

ONE_DECIMAL = Decimal("0.1")


def _local_midnight_utc(now=None):
    local_now = (now or datetime.now(timezone.utc)).astimezone()
    midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(timezone.utc)


class StatsService:
    @staticmethod
    def average_rating(ratings):
        ratings = list(ratings)
        if not ratings:
            return 0
        mean = Decimal(sum(ratings)) / Decimal(len(ratings))
        return float(mean.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))

    @staticmethod
    def compute_place_stats(reviews):
        """Review aggregates for one place.

        Pure: accepts Review rows or plain ratings and never touches the
        database, so list views can feed it reviews fetched in bulk.
        """
        ratings = [r if isinstance(r, int) else r.rating for r in reviews]
        return {
            "reviewCount": len(ratings),
            "averageRating": StatsService.average_rating(ratings),
        }

    @staticmethod
    def compute_admin_stats(now=None):
        # Each counter is its own query; no cross-field snapshot.
        total_places = Place.query.count()
        approved_places = Place.query.filter(Place.approved.is_(True)).count()
        pending_places = Place.query.filter(Place.approved.is_(False)).count()
        approved_today = (
            Place.query.filter(Place.approved.is_(True))
            .filter(Place.approved_at >= _local_midnight_utc(now))
            .count()
        )
        pending_images = PlaceImageSubmission.query.filter(PlaceImageSubmission.approved.is_(False)).count()
        return {
            "totalPlaces": total_places,
            "approvedPlaces": approved_places,
            "pendingPlaces": pending_places,
            "approvedToday": approved_today,
            "pendingImages": pending_images,
        }
