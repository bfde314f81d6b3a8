# remote/realtime.py
# Path-hierarchical backend (Realtime Database REST API)

from .base import HttpRemoteStore, evaluation_path, now_millis

STRUCTURE_PATH = 'structure'
EVALUATIONS_PATH = 'evaluations'
ADMIN_PASSWORD_PATH = 'settings/adminPassword'

# Replaced by the server with its own clock on write
SERVER_TIMESTAMP = {'.sv': 'timestamp'}

REQUIRED_SETTINGS = (
    'api_key', 'auth_domain', 'project_id', 'storage_bucket',
    'messaging_sender_id', 'app_id', 'database_url',
)


class RealtimeRemoteStore(HttpRemoteStore):
    """Everything lives under database_url as JSON paths: structure, evaluations/<event>/<group>/<id>, settings."""

    def __init__(self, settings, session=None, timeout=10):
        super().__init__(session=session, timeout=timeout)
        self.settings = dict(settings)
        self.database_url = (self.settings.get('database_url') or '').rstrip('/')

    @property
    def configured(self):
        return all(self.settings.get(name) for name in REQUIRED_SETTINGS)

    def _url(self, path):
        return f'{self.database_url}/{path}.json'

    def _get(self, path):
        return self._request('GET', self._url(path), allow_missing=True)

    def _put(self, path, value):
        self._request('PUT', self._url(path), json=value)

    def fetch_structure_snapshot(self):
        if not self.configured:
            return None
        return self._get(STRUCTURE_PATH)

    def fetch_evaluations_snapshot(self):
        if not self.configured:
            return None
        return self._get(EVALUATIONS_PATH) or None

    def push_structure_snapshot(self, snapshot):
        if not self.configured:
            return None
        self._put(STRUCTURE_PATH, {
            'events': snapshot.get('events', []),
            'groups': snapshot.get('groups', []),
            'criteria': snapshot.get('criteria', []),
            'updatedAt': SERVER_TIMESTAMP,
        })

    def push_evaluation(self, evaluation):
        if not self.configured:
            return None
        self._put(evaluation_path(evaluation), dict(evaluation, syncedAt=now_millis()))

    def fetch_admin_password(self):
        if not self.configured:
            return None
        password = self._get(ADMIN_PASSWORD_PATH)
        return password if isinstance(password, str) and password else None

    def save_admin_password(self, password):
        if not self.configured:
            return None
        self._put(ADMIN_PASSWORD_PATH, password)
