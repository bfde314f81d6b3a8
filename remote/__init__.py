# remote/__init__.py
# Remote store adapters

import logging

from .base import (
    RemoteStore, NullRemoteStore, HttpRemoteStore,
    flatten_evaluations_tree, build_evaluations_tree, evaluation_key, evaluation_path,
)
from .firestore import FirestoreRemoteStore
from .realtime import RealtimeRemoteStore

logger = logging.getLogger(__name__)

BACKENDS = ('firestore', 'realtime')


def remote_settings(config):
    """Connection parameters from the app config (FIREBASE_* keys)."""
    return {
        'api_key': config.get('FIREBASE_API_KEY'),
        'auth_domain': config.get('FIREBASE_AUTH_DOMAIN'),
        'project_id': config.get('FIREBASE_PROJECT_ID'),
        'storage_bucket': config.get('FIREBASE_STORAGE_BUCKET'),
        'messaging_sender_id': config.get('FIREBASE_MESSAGING_SENDER_ID'),
        'app_id': config.get('FIREBASE_APP_ID'),
        'database_url': config.get('FIREBASE_DATABASE_URL'),
    }


def build_remote_store(config, session=None):
    """
    Builds the remote store selected by REMOTE_BACKEND. Returns a
    NullRemoteStore when the required connection parameters are missing.
    """
    backend = (config.get('REMOTE_BACKEND') or 'firestore').lower()
    if backend not in BACKENDS:
        raise ValueError(f'Unknown REMOTE_BACKEND {backend!r}, expected one of {BACKENDS}')

    settings = remote_settings(config)
    timeout = config.get('REMOTE_TIMEOUT', 10)
    if backend == 'realtime':
        store = RealtimeRemoteStore(settings, session=session, timeout=timeout)
    else:
        store = FirestoreRemoteStore(settings['api_key'], settings['project_id'], session=session, timeout=timeout)

    if not store.configured:
        logger.info('Remote store (%s) not configured, running local-only', backend)
        return NullRemoteStore()
    logger.info('Remote store: %s', backend)
    return store
