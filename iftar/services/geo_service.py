import math

EARTH_RADIUS_KM = 6371

# Rough bounding box of the UAE.
UAE_BOUNDS = {"min_lat": 22.0, "max_lat": 27.0, "min_lng": 51.0, "max_lng": 57.0}


def _to_float(value):
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


class GeoService:
    @staticmethod
    def in_uae(lat, lng):
        return (
            math.isfinite(lat)
            and math.isfinite(lng)
            and UAE_BOUNDS["min_lat"] <= lat <= UAE_BOUNDS["max_lat"]
            and UAE_BOUNDS["min_lng"] <= lng <= UAE_BOUNDS["max_lng"]
        )

    @staticmethod
    def haversine_km(lat1, lng1, lat2, lng2):
        d_lat = math.radians(lat2 - lat1)
        d_lng = math.radians(lng2 - lng1)
        a = (
            math.sin(d_lat / 2) ** 2
            + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
        )
        return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    @staticmethod
    def distance_to(place, lat, lng):
        place_lat = _to_float(place.get("latitude"))
        place_lng = _to_float(place.get("longitude"))
        if not (math.isfinite(place_lat) and math.isfinite(place_lng)):
            return math.inf
        if place_lat == 0 and place_lng == 0:
            return math.inf
        return GeoService.haversine_km(lat, lng, place_lat, place_lng)

    @staticmethod
    def rank_nearby(places, lat, lng, limit=20):
        """Sort serialized places by distance from (lat, lng), nearest first.

        Places without usable coordinates sort last. ``distance`` is in km and
        is ``None`` for those places so the payload stays valid JSON.
        """
        ranked = sorted(
            ((GeoService.distance_to(place, lat, lng), place) for place in places),
            key=lambda item: item[0],
        )
        results = []
        for distance, place in ranked[:limit]:
            results.append({**place, "distance": distance if math.isfinite(distance) else None})
        return results
