import os
import time

import click
from dotenv import load_dotenv
from flask import Flask, current_app, g, request
from werkzeug.middleware.proxy_fix import ProxyFix

from iftar.config import config_by_env
from iftar.errors import register_error_handlers
from iftar.extensions import cache, db, limiter, login_manager, migrate
from iftar.routes.api import api_bp
from iftar.routes.web.seo import web_seo_bp
from iftar.services import IdentityService, seed_places_if_empty


@login_manager.request_loader
def load_user_from_request(req):
    token = IdentityService.bearer_token(req.headers.get("Authorization"))
    if not token:
        return None
    try:
        return IdentityService.resolve_user(token)
    except Exception as exc:
        db.session.rollback()
        current_app.logger.warning("Auth verification failed: %s", exc)
        return None


def create_app(config_name=None):
    load_dotenv()
    env = config_name or os.getenv("FLASK_ENV", "development")

    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_by_env.get(env, config_by_env["development"]))
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
    if db_uri.startswith("sqlite:///") and not db_uri.startswith("sqlite:////") and db_uri != "sqlite:///:memory:":
        relative_path = db_uri.replace("sqlite:///", "", 1)
        absolute_path = os.path.join(project_root, relative_path)
        os.makedirs(os.path.dirname(absolute_path), exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{absolute_path}"

    db.init_app(app)
    migrate.init_app(app, db)
    cache.init_app(app)
    limiter.init_app(app)
    login_manager.init_app(app)
    _init_sentry(app)

    register_error_handlers(app)
    _register_request_hooks(app)

    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(web_seo_bp)

    @app.cli.command("seed")
    @click.option("--timeout", type=float, default=None, help="Seconds to wait for the database.")
    def seed_command(timeout):
        """Insert sample places when the database is empty."""
        created = seed_places_if_empty(app, timeout=timeout)
        click.echo(f"Seeded {created} place(s).")

    if env == "development":
        with app.app_context():
            db.create_all()

    if app.config.get("SEED_ON_STARTUP"):
        seed_places_if_empty(app)

    return app


def _register_request_hooks(app):
    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_and_secure(response):
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        response.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin-allow-popups")

        if request.path.startswith("/api"):
            started = g.get("request_started")
            duration_ms = (time.perf_counter() - started) * 1000 if started else 0
            app.logger.info("%s %s %s in %dms", request.method, request.path, response.status_code, duration_ms)
        return response


def _init_sentry(app):
    dsn = app.config.get("SENTRY_DSN")
    if not dsn:
        return
    try:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=dsn,
            integrations=[FlaskIntegration()],
            traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.05")),
            environment=os.getenv("FLASK_ENV", "production"),
        )
        app.logger.info("Sentry initialized.")
    except Exception as exc:
        app.logger.warning("Sentry initialization failed: %s", exc)

