# config.py
# Application configuration, read from environment variables

import os


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    # Relative sqlite paths live in the Flask instance folder
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///evaluations.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.environ.get('SECRET_KEY', 'your-secret-key-change-me')  # Replace in production

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # --- Remote store ---
    # 'firestore' (flat document collection) or 'realtime' (path hierarchy)
    REMOTE_BACKEND = os.environ.get('REMOTE_BACKEND', 'firestore')
    FIREBASE_API_KEY = os.environ.get('FIREBASE_API_KEY')
    FIREBASE_AUTH_DOMAIN = os.environ.get('FIREBASE_AUTH_DOMAIN')
    FIREBASE_PROJECT_ID = os.environ.get('FIREBASE_PROJECT_ID')
    FIREBASE_STORAGE_BUCKET = os.environ.get('FIREBASE_STORAGE_BUCKET')
    FIREBASE_MESSAGING_SENDER_ID = os.environ.get('FIREBASE_MESSAGING_SENDER_ID')
    FIREBASE_APP_ID = os.environ.get('FIREBASE_APP_ID')
    FIREBASE_DATABASE_URL = os.environ.get('FIREBASE_DATABASE_URL')

    # Seconds
    REMOTE_TIMEOUT = float(os.environ.get('REMOTE_TIMEOUT', '10'))
    BOOTSTRAP_TIMEOUT = float(os.environ.get('BOOTSTRAP_TIMEOUT', '30'))
    SYNC_MAX_WORKERS = int(os.environ.get('SYNC_MAX_WORKERS', '4'))

    # --- Scoring / auth ---
    MEMBER_AVERAGE_ZERO_FOR_MISSING = _env_bool('MEMBER_AVERAGE_ZERO_FOR_MISSING')
    DEFAULT_ADMIN_PASSWORD = os.environ.get('DEFAULT_ADMIN_PASSWORD', 'admin')

    # --- Group feedback (Gemini) ---
    GEMINI_API_KEY = os.environ.get('GEMINI_API_KEY')
    FEEDBACK_MODEL = os.environ.get('FEEDBACK_MODEL', 'gemini-2.5-flash')


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'test'
    FIREBASE_API_KEY = None
    FIREBASE_PROJECT_ID = None
    FIREBASE_DATABASE_URL = None
    BOOTSTRAP_TIMEOUT = 5
    GEMINI_API_KEY = None
