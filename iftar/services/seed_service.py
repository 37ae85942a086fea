from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout

from iftar.extensions import db
from iftar.models import Place, Review, User

SEED_USER_UID = "system_seed_user"

SEED_PLACES = [
    {
        "name": "Al Hallab - Dubai Mall",
        "description": "Authentic Lebanese cuisine with a view of the fountains. Great for families.",
        "location": "Dubai Mall, Downtown Dubai",
        "review": {"rating": 5, "comment": "Amazing food and atmosphere!"},
    },
    {
        "name": "Seven Sands",
        "description": "Traditional Emirati cuisine with a modern twist. Located at The Beach, JBR.",
        "location": "The Beach, JBR, Dubai",
    },
    {
        "name": "Tent Jumeirah Restaurant",
        "description": "Experience iftar in a traditional setting right by the sea.",
        "location": "Umm Suqeim, Jumeirah, Dubai",
    },
]


def _count_places(app):
    with app.app_context():
        return Place.query.count()


def _seed_user():
    user = User.query.filter_by(firebase_uid=SEED_USER_UID).first()
    if not user:
        user = User(firebase_uid=SEED_USER_UID, first_name="System")
        db.session.add(user)
        db.session.flush()
    return user


def seed_places_if_empty(app, timeout=None):
    """Insert sample places into an empty database.

    The emptiness check is abandoned after ``timeout`` seconds so an
    unreachable datastore cannot hang startup. Returns the number of places
    created.
    """
    timeout = app.config["SEED_TIMEOUT_SECONDS"] if timeout is None else timeout
    app.logger.info("Checking if database needs seeding...")

    executor = ThreadPoolExecutor(max_workers=1)
    try:
        existing = executor.submit(_count_places, app).result(timeout=timeout)
    except FutureTimeout:
        app.logger.warning("Seeding skipped: database did not respond within %ss", timeout)
        return 0
    except Exception as exc:
        app.logger.warning("Seeding skipped: %s", exc)
        return 0
    finally:
        executor.shutdown(wait=False)

    app.logger.info("Database has %d places", existing)
    if existing:
        return 0

    with app.app_context():
        user = _seed_user()
        for sample in SEED_PLACES:
            place = Place(
                name=sample["name"],
                description=sample["description"],
                location=sample["location"],
                created_by=user.id,
            )
            db.session.add(place)
            db.session.flush()
            if "review" in sample:
                db.session.add(Review(place_id=place.id, user_id=user.id, **sample["review"]))
        db.session.commit()

    app.logger.info("Seeding complete.")
    return len(SEED_PLACES)
