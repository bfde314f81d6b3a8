# app.py
# Flask application using the Application Factory pattern

import logging
import os

from flask import Flask, jsonify

from config import Config
from errors import EvaluationHubError
from feedback import make_client
from extensions import db, migrate
from notifications import Notifier
from remote import build_remote_store
from storage import LocalStore
from sync import SyncEngine

# Imported so Flask-Migrate (Alembic) sees every table
from models import Event, Group, Member, Criterion, Evaluation, Setting


def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app.logger.setLevel(level)


def create_app(config_class=Config, remote=None):
    """
    Builds the app, creates the local tables and runs the one-time bootstrap
    from the remote store, so the returned app is ready to accept writes.
    ``remote`` overrides the store built from the configuration.
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_logging(app)
    os.makedirs(app.instance_path, exist_ok=True)

    # --- Extensions ---
    db.init_app(app)
    migrate.init_app(app, db)

    if remote is None:
        remote = build_remote_store(app.config)
    notifier = Notifier()
    app.extensions['feedback_client'] = make_client(app.config['GEMINI_API_KEY'])

    with app.app_context():
        db.create_all()
        store = LocalStore(db.session, default_admin_password=app.config['DEFAULT_ADMIN_PASSWORD'])
        engine = SyncEngine(
            remote,
            notifier,
            max_workers=app.config['SYNC_MAX_WORKERS'],
            bootstrap_timeout=app.config['BOOTSTRAP_TIMEOUT'],
            has_structure=store.has_structure(),
        )
        app.extensions['notifier'] = notifier
        app.extensions['sync_engine'] = engine
        engine.bootstrap(store)

    # --- Blueprints ---
    from routes.auth import auth_bp
    from routes.main import main_bp
    from routes.admin import admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(main_bp)
    app.register_blueprint(admin_bp)

    @app.errorhandler(EvaluationHubError)
    def handle_evaluation_error(error):
        db.session.rollback()
        return jsonify(error.to_dict()), error.status_code

    return app
