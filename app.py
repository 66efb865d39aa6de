from __future__ import annotations
import logging
import os
from flask import Flask
from config import config_map
from extensions import db, migrate, login_manager
from sqlalchemy import inspect

log = logging.getLogger(__name__)


def _seed_from_config(app):
    if not app.config.get("SEED_TEST_DATA"):
        return
    with app.app_context():
        # tables may not exist yet (before `flask db upgrade`)
        insp = inspect(db.engine)
        if not (insp.has_table("u_users") and insp.has_table("tracks")):
            return

        # local imports to avoid cycles
        from blueprints.auth.services import ensure_users
        from blueprints.directory.services import ensure_default_tracks

        _, created = ensure_default_tracks()
        created += ensure_users(app.config.get("DEFAULT_USERS", []))
        db.session.commit()
        if created:
            log.info("seeded %d rows from config", created)


def register_blueprints(app: Flask) -> None:
    from blueprints.core import bp as core_bp
    from blueprints.auth.routes import bp as auth_bp
    from blueprints.directory import bp as directory_bp
    from blueprints.tbdrs import bp as tbdrs_bp

    prefix = app.config.get("API_PREFIX") or None
    # core stays unprefixed so /health is always at the root
    app.register_blueprint(core_bp)
    app.register_blueprint(auth_bp, url_prefix=prefix)
    app.register_blueprint(directory_bp, url_prefix=prefix)
    app.register_blueprint(tbdrs_bp, url_prefix=prefix)


def create_app(config_name: str | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    cfg_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config_map[cfg_name])
    app.json.sort_keys = False

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    register_blueprints(app)
    _seed_from_config(app)
    return app
