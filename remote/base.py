# remote/base.py
# Contract of the optional remote store, and the evaluations tree helpers

import logging
import time

import requests

from errors import RemoteStoreError

logger = logging.getLogger(__name__)


def now_millis():
    return int(time.time() * 1000)


def evaluation_key(evaluation):
    """Flat document id of an evaluation: eventId_groupId_id."""
    return f"{evaluation['eventId']}_{evaluation['groupId']}_{evaluation['id']}"


def evaluation_path(evaluation):
    """Hierarchical location of an evaluation."""
    return f"evaluations/{evaluation['eventId']}/{evaluation['groupId']}/{evaluation['id']}"


def flatten_evaluations_tree(tree):
    """
    Turns {eventId: {groupId: {evaluationId: evaluation}}} into a flat list.
    Empty branches and empty leaves are skipped.
    """
    result = []
    for groups_by_event in _children(tree):
        for evaluations_by_group in _children(groups_by_event):
            for evaluation in _children(evaluations_by_group):
                if evaluation:
                    result.append(evaluation)
    return result


def _children(node):
    # Hierarchical backends may return sparse lists instead of maps
    if not node:
        return []
    if isinstance(node, dict):
        return list(node.values())
    return [child for child in node if child is not None]


def build_evaluations_tree(records):
    """Inverse of flatten_evaluations_tree. Returns None when there are no records."""
    tree = {}
    for record in records:
        tree.setdefault(record['eventId'], {}).setdefault(record['groupId'], {})[record['id']] = record
    return tree or None


class RemoteStore:
    """
    Remote copy of the structure document, the evaluations and the admin
    password. Subclasses implement the backend; when ``configured`` is False
    every operation is a no-op returning None.
    """

    configured = True

    def fetch_structure_snapshot(self):
        raise NotImplementedError

    def fetch_evaluations_snapshot(self):
        raise NotImplementedError

    def push_structure_snapshot(self, snapshot):
        raise NotImplementedError

    def push_evaluation(self, evaluation):
        raise NotImplementedError

    def fetch_admin_password(self):
        raise NotImplementedError

    def save_admin_password(self, password):
        raise NotImplementedError


class NullRemoteStore(RemoteStore):
    """Used when no remote store is configured: the app runs local-only."""

    configured = False

    def fetch_structure_snapshot(self):
        return None

    def fetch_evaluations_snapshot(self):
        return None

    def push_structure_snapshot(self, snapshot):
        return None

    def push_evaluation(self, evaluation):
        return None

    def fetch_admin_password(self):
        return None

    def save_admin_password(self, password):
        return None


class HttpRemoteStore(RemoteStore):
    """Shared plumbing of the REST backends: one session, bounded timeouts, error mapping."""

    def __init__(self, session=None, timeout=10):
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method, url, allow_missing=False, **kwargs):
        kwargs.setdefault('timeout', self.timeout)
        logger.debug('%s %s', method, self._safe_url(url))
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise RemoteStoreError(f'{method} {self._safe_url(url)} failed: {exc}') from exc

        if allow_missing and response.status_code == 404:
            return None
        if not 200 <= response.status_code < 300:
            raise RemoteStoreError(f'{method} {self._safe_url(url)} returned HTTP {response.status_code}')
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteStoreError(f'{method} {self._safe_url(url)} returned invalid JSON') from exc

    @staticmethod
    def _safe_url(url):
        # Never log API keys
        return url.split('?', 1)[0]
