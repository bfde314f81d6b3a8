# remote/firestore.py
# Flat document backend (Firestore REST API)

import logging
from urllib.parse import quote

from .base import HttpRemoteStore, build_evaluations_tree, evaluation_key, now_millis
from .firestore_codec import decode_document, encode_document

logger = logging.getLogger(__name__)

FIRESTORE_URL = 'https://firestore.googleapis.com/v1'

STRUCTURE_DOC = 'app/structure'
SETTINGS_DOC = 'app/settings'
EVALUATIONS_COLLECTION = 'evaluations'
PAGE_SIZE = 300


class FirestoreRemoteStore(HttpRemoteStore):
    """
    Structure in a single document, one document per evaluation keyed by
    eventId_groupId_evaluationId, admin password in a settings document.
    Only the API key and project id are required.
    """

    def __init__(self, api_key, project_id, session=None, timeout=10, base_url=FIRESTORE_URL):
        super().__init__(session=session, timeout=timeout)
        self.api_key = api_key
        self.project_id = project_id
        self.documents_url = f'{base_url}/projects/{project_id}/databases/(default)/documents'

    @property
    def configured(self):
        return bool(self.api_key and self.project_id)

    def _url(self, path):
        return f'{self.documents_url}/{path}'

    def _params(self, **extra):
        params = {'key': self.api_key}
        params.update(extra)
        return params

    def _get_document(self, path):
        return decode_document(self._request('GET', self._url(path), allow_missing=True, params=self._params()))

    def _set_document(self, path, data, field_paths=None):
        # PATCH without an update mask replaces the whole document
        params = self._params()
        if field_paths:
            params['updateMask.fieldPaths'] = field_paths
        self._request('PATCH', self._url(path), params=params, json=encode_document(data))

    # --- Structure ---

    def fetch_structure_snapshot(self):
        if not self.configured:
            return None
        return self._get_document(STRUCTURE_DOC)

    def push_structure_snapshot(self, snapshot):
        if not self.configured:
            return None
        self._set_document(STRUCTURE_DOC, {
            'events': snapshot.get('events', []),
            'groups': snapshot.get('groups', []),
            'criteria': snapshot.get('criteria', []),
            'updatedAt': now_millis(),
        })

    # --- Evaluations ---

    def fetch_evaluations_snapshot(self):
        if not self.configured:
            return None
        records = []
        page_token = None
        while True:
            params = self._params(pageSize=PAGE_SIZE)
            if page_token:
                params['pageToken'] = page_token
            page = self._request('GET', self._url(EVALUATIONS_COLLECTION), allow_missing=True, params=params) or {}
            for document in page.get('documents', []):
                record = decode_document(document)
                if not record or not all(record.get(k) is not None for k in ('eventId', 'groupId', 'id')):
                    logger.warning('Skipping evaluation document without ids: %s', document.get('name'))
                    continue
                records.append(record)
            page_token = page.get('nextPageToken')
            if not page_token:
                break
        return build_evaluations_tree(records)

    def push_evaluation(self, evaluation):
        if not self.configured:
            return None
        document_id = quote(evaluation_key(evaluation), safe='')
        self._set_document(f'{EVALUATIONS_COLLECTION}/{document_id}', dict(evaluation, syncedAt=now_millis()))

    # --- Admin password ---

    def fetch_admin_password(self):
        if not self.configured:
            return None
        settings = self._get_document(SETTINGS_DOC) or {}
        return settings.get('adminPassword') or None

    def save_admin_password(self, password):
        if not self.configured:
            return None
        self._set_document(SETTINGS_DOC, {'adminPassword': password}, field_paths='adminPassword')
