import copy
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import create_app  # noqa: E402
from config import TestConfig  # noqa: E402
from errors import RemoteStoreError  # noqa: E402
from remote import RemoteStore, build_evaluations_tree  # noqa: E402


class FakeRemoteStore(RemoteStore):
    """In-memory remote store with switches to simulate outages."""

    configured = True

    def __init__(self, structure=None, evaluations=None, password=None):
        self.structure = copy.deepcopy(structure)
        self.evaluations = {e['id']: copy.deepcopy(e) for e in (evaluations or [])}
        self.password = password
        self.fail_fetch = False
        self.fail_structure_push = False
        self.fail_evaluation_push = False
        self.structure_pushes = []
        self.evaluation_pushes = []
        self.saved_passwords = []

    def fetch_structure_snapshot(self):
        if self.fail_fetch:
            raise RemoteStoreError('offline')
        return copy.deepcopy(self.structure)

    def fetch_evaluations_snapshot(self):
        if self.fail_fetch:
            raise RemoteStoreError('offline')
        return build_evaluations_tree(copy.deepcopy(list(self.evaluations.values())))

    def fetch_admin_password(self):
        if self.fail_fetch:
            raise RemoteStoreError('offline')
        return self.password

    def push_structure_snapshot(self, snapshot):
        self.structure_pushes.append(copy.deepcopy(snapshot))
        if self.fail_structure_push:
            raise RemoteStoreError('offline')
        self.structure = dict(copy.deepcopy(snapshot), updatedAt=1)

    def push_evaluation(self, evaluation):
        self.evaluation_pushes.append(copy.deepcopy(evaluation))
        if self.fail_evaluation_push:
            raise RemoteStoreError('offline')
        self.evaluations[evaluation['id']] = dict(copy.deepcopy(evaluation), syncedAt=1)

    def save_admin_password(self, password):
        self.saved_passwords.append(password)
        self.password = password


def make_app(remote=None):
    return create_app(TestConfig, remote=remote)


@pytest.fixture
def app():
    app = make_app()
    yield app
    app.extensions['sync_engine'].shutdown()


@pytest.fixture
def remote():
    return FakeRemoteStore()


@pytest.fixture
def synced_app(remote):
    app = make_app(remote)
    yield app
    app.extensions['sync_engine'].shutdown()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    client = app.test_client()
    response = client.post('/login', json={'password': 'admin'})
    assert response.status_code == 200
    return client


@pytest.fixture
def synced_admin(synced_app):
    client = synced_app.test_client()
    assert client.post('/login', json={'password': 'admin'}).status_code == 200
    return client


class FakeGenaiClient:
    """Stands in for ``genai.Client``: records prompts, answers with fixed text or raises."""

    def __init__(self, text=None, error=None):
        self.models = self
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, model, contents):
        self.calls.append({'model': model, 'contents': contents})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)
