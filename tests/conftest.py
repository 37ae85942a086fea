from datetime import datetime, timedelta, timezone

import pytest
from flask import g
from flask.testing import FlaskClient

from iftar import create_app
from iftar.extensions import db
from iftar.models import Place, Review, User
from iftar.services import IdentityService

TOKENS = {
    "user-token": {"uid": "uid-user", "email": "aisha@example.com", "name": "Aisha Al Mansoori", "picture": None},
    "other-token": {"uid": "uid-other", "email": "omar@example.com", "name": "Omar", "picture": None},
    "admin-token": {"uid": "uid-admin", "email": "admin@example.com", "name": "Admin User", "picture": None},
}

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def fake_verify_token(id_token):
    if id_token not in TOKENS:
        raise ValueError("Invalid token")
    return dict(TOKENS[id_token])


def auth(token):
    return {"Authorization": f"Bearer {token}"}


class ApiClient(FlaskClient):
    """Test client whose requests each resolve the caller from their own headers.

    The fixture keeps one app context open for the whole test, so Flask-Login's
    per-context user has to be dropped before every request.
    """

    def open(self, *args, **kwargs):
        g.pop("_login_user", None)
        return super().open(*args, **kwargs)


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setattr(IdentityService, "verify_token", staticmethod(fake_verify_token))
    app = create_app("testing")
    app.test_client_class = ApiClient
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(uid="uid-user", is_admin=False, **fields):
    user = User(firebase_uid=uid, is_admin=is_admin, **fields)
    db.session.add(user)
    db.session.commit()
    return user


def make_place(creator, name="Al Fanar", approved=False, images=(), minutes=0, **fields):
    slots = list(images) + [None] * (3 - len(images))
    place = Place(
        name=name,
        location=fields.pop("location", "Dubai Festival City"),
        created_by=creator.id,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        image_url_1=slots[0],
        image_url_2=slots[1],
        image_url_3=slots[2],
        approved=approved,
        approved_by=fields.pop("approved_by", creator.id) if approved else None,
        approved_at=fields.pop("approved_at", datetime.now(timezone.utc)) if approved else None,
        **fields,
    )
    db.session.add(place)
    db.session.commit()
    return place


def add_review(place, user_id, rating, minutes=0, comment=None):
    review = Review(
        place_id=place.id,
        user_id=user_id,
        rating=rating,
        comment=comment,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )
    db.session.add(review)
    db.session.commit()
    return review


@pytest.fixture
def user(app):
    return make_user("uid-user", first_name="Aisha")


@pytest.fixture
def admin(app):
    return make_user("uid-admin", is_admin=True, first_name="Admin")
