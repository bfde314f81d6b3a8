# extensions.py
# Flask extension instances and accessors for the per-app services

import uuid

from flask import current_app, session
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()


# --- Created in create_app() and stored in app.extensions ---

def get_engine():
    return current_app.extensions['sync_engine']


def get_notifier():
    return current_app.extensions['notifier']


def get_store():
    # storage imports the models, which import this module
    from storage import LocalStore
    return LocalStore(db.session, default_admin_password=current_app.config['DEFAULT_ADMIN_PASSWORD'])


def get_client_id():
    """Id of the calling browser session, used to address notices to it."""
    if 'client_id' not in session:
        session['client_id'] = uuid.uuid4().hex
    return session['client_id']
