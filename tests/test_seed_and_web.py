import time

from sqlalchemy import inspect

from iftar import create_app
from iftar.config import DevelopmentConfig
from iftar.extensions import cache, db
from iftar.models import Place, Review
from iftar.services import ModerationService, seed_places_if_empty
from iftar.services import seed_service
from tests.conftest import make_place


def test_seed_populates_empty_database(app):
    assert seed_places_if_empty(app, timeout=5) == 3

    places = Place.query.all()
    assert len(places) == 3
    assert all(place.approved is False for place in places)
    assert Review.query.count() == 1
    assert seed_places_if_empty(app, timeout=5) == 0


def test_seed_skips_when_database_is_slow(app, monkeypatch):
    def slow_count(_app):
        time.sleep(0.5)
        return 0

    monkeypatch.setattr(seed_service, "_count_places", slow_count)

    assert seed_places_if_empty(app, timeout=0.05) == 0
    assert Place.query.count() == 0


def test_seed_skips_when_database_errors(app, monkeypatch):
    def broken_count(_app):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(seed_service, "_count_places", broken_count)

    assert seed_places_if_empty(app, timeout=5) == 0


def test_seed_cli_command(app):
    result = app.test_cli_runner().invoke(args=["seed", "--timeout", "5"])
    assert "Seeded 3 place(s)." in result.output


def test_robots(client):
    response = client.get("/robots.txt")
    assert response.mimetype == "text/plain"
    assert "Sitemap: https://localhost/sitemap.xml" in response.get_data(as_text=True)


def test_sitemap_lists_approved_places(client, user, admin):
    approved = make_place(user, name="Approved")
    ModerationService.approve_place(approved.id, admin.id)
    pending = make_place(user, name="Pending")

    response = client.get("/sitemap.xml")

    body = response.get_data(as_text=True)
    assert response.mimetype == "application/xml"
    assert f"https://localhost/places/{approved.id}" in body
    assert pending.id not in body
    assert "<loc>https://localhost/add</loc>" in body


def test_sitemap_cache_is_per_host(app, client, user):
    cache.init_app(app, config={"CACHE_TYPE": "SimpleCache"})
    make_place(user, name="Approved", approved=True)

    first = client.get("/sitemap.xml", base_url="https://iftar.example.ae").get_data(as_text=True)
    second = client.get("/sitemap.xml", base_url="https://www.iftar.example.ae").get_data(as_text=True)

    assert "<loc>https://iftar.example.ae/</loc>" in first
    assert "<loc>https://www.iftar.example.ae/</loc>" in second
    assert "https://iftar.example.ae/" not in second


def test_development_app_creates_schema(monkeypatch, tmp_path):
    monkeypatch.setattr(DevelopmentConfig, "SQLALCHEMY_DATABASE_URI", f"sqlite:///{tmp_path / 'iftar.db'}")
    monkeypatch.setattr(DevelopmentConfig, "SEED_ON_STARTUP", False)

    app = create_app("development")

    with app.app_context():
        tables = set(inspect(db.engine).get_table_names())
    assert {"users", "places", "reviews", "place_image_submissions"} <= tables
