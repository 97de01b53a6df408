import logging
import os

from dotenv import load_dotenv
from flask import Flask, g, jsonify, request
from flask_cors import CORS
from sqlalchemy import inspect as sa_inspect
from werkzeug.exceptions import HTTPException

from app.kpidash.config import is_production, load_config
from app.kpidash.db import init_db, teardown_db_session
from app.kpidash.routes import bp as routes_bp
from app.kpidash.auth import bp as auth_bp, load_current_user
from app.kpidash.modules.clients.api import bp as clients_bp
from app.kpidash.modules.team.api import bp as team_bp
from app.kpidash.modules.social_media.api import bp as social_media_bp
from app.kpidash.modules.website_seo.api import bp as website_seo_bp
from app.kpidash.modules.ads.api import bp as ads_bp
from app.kpidash.modules.email_marketing.api import bp as email_marketing_bp
from app.kpidash.modules.client_responses.api import bp as client_responses_bp
from app.kpidash.modules.team_kpis.api import bp as team_kpis_bp
from app.kpidash.modules.activities.api import bp as activities_bp

_PUBLIC_PREFIXES = ("/healthz", "/api/health")


def _configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get("LOG_LEVEL") or "INFO"), logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    root.setLevel(level)
    app.logger.setLevel(level)


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__)
    app.config.from_mapping(load_config())
    # keep key order as written by the serializers
    app.json.sort_keys = False
    _configure_logging(app)

    # Production guardrails (fail fast with clear logs)
    if is_production(app.config.get("ENV")):
        if not os.environ.get("DATABASE_URL") and not os.environ.get("NEON_DATABASE_URL"):
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")
        if str(app.config.get("JWT_SECRET") or "") in ("", "change-me"):
            raise RuntimeError("JWT_SECRET must be set to a strong value in production (not default).")

    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose()
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    app.register_blueprint(routes_bp)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(clients_bp, url_prefix="/api/clients")
    app.register_blueprint(team_bp, url_prefix="/api/team")
    app.register_blueprint(social_media_bp, url_prefix="/api/social-media")
    app.register_blueprint(website_seo_bp, url_prefix="/api/website-seo")
    app.register_blueprint(ads_bp, url_prefix="/api/ads")
    app.register_blueprint(email_marketing_bp, url_prefix="/api/email")
    app.register_blueprint(client_responses_bp, url_prefix="/api/responses")
    app.register_blueprint(team_kpis_bp, url_prefix="/api/team-kpis")
    app.register_blueprint(activities_bp, url_prefix="/api/activities")

    def _load_user_wrapper():
        if request.path.startswith(_PUBLIC_PREFIXES) or request.method == "OPTIONS":
            g.current_user = None
            return None
        return load_current_user()

    app.before_request(_load_user_wrapper)
    app.teardown_appcontext(teardown_db_session)

    # Schema health (lean): warn loudly when migrations have not been applied.
    def _run_schema_health_check() -> None:
        from app.kpidash.models import Base

        engine = app.extensions["sqlalchemy_engine"]
        try:
            existing = set(sa_inspect(engine).get_table_names())
        except Exception:
            app.logger.exception("Schema health check failed")
            return
        missing = sorted(set(Base.metadata.tables) - existing)
        if missing:
            app.logger.warning("DB schema out of date; run `alembic upgrade head`. Missing tables: %s", ", ".join(missing))

    _run_schema_health_check()

    @app.errorhandler(HTTPException)
    def _err_http(e: HTTPException):  # type: ignore[no-redef]
        if e.code and e.code >= 500:
            app.logger.error("HTTP %s (request_id=%s): %s", e.code, getattr(g, "request_id", None), e.description)
        return jsonify({"error": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def _err_500(e: Exception):  # type: ignore[no-redef]
        # Roll back whatever the handler left half-done before the session is closed.
        s = getattr(g, "db_session", None)
        if s is not None:
            s.rollback()
        app.logger.exception("Unhandled error on %s %s (request_id=%s)", request.method, request.path, getattr(g, "request_id", None))
        return jsonify({"error": "Internal server error"}), 500

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")

    return app
