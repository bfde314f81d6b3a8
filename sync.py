# sync.py
# Reconciliation between the local store and the optional remote store

import enum
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait

from errors import RemoteStoreError
from remote import flatten_evaluations_tree
from storage import STRUCTURE_KEYS

logger = logging.getLogger(__name__)

BOOTSTRAP_FAILED_MESSAGE = 'Could not load data from the server. Using local data.'
STRUCTURE_PUSH_FAILED_TITLE = 'Error saving to the database'
STRUCTURE_PUSH_FAILED_MESSAGE = (
    'Your changes could not be saved on the server. Check your internet connection and try again. '
    'The data is still saved locally.'
)
EVALUATION_PUSH_FAILED_TITLE = 'Error saving evaluation'
EVALUATION_PUSH_FAILED_MESSAGE = (
    'Your evaluation could not be sent to the server. Check your internet connection. '
    'The evaluation was saved locally; submit it again once the connection is back.'
)


class SyncState(enum.Enum):
    UNINITIALIZED = 'uninitialized'
    BOOTSTRAPPING = 'bootstrapping'
    READY = 'ready'


class NoticeFlag(enum.Enum):
    CLEAR = 'clear'
    SHOWN = 'shown'


class SyncEngine:
    """
    Pulls remote data into the local store once at startup (bootstrap), then
    pushes every local change back without blocking the caller.

    Pushes run on a thread pool and are never retried: a failed push is
    reported and dropped, the next mutation sends a fresh snapshot. Nothing
    orders concurrent pushes, so the last one to reach the server wins.
    """

    def __init__(self, remote, notifier, max_workers=4, bootstrap_timeout=30, has_structure=False):
        self.remote = remote
        self.notifier = notifier
        self.bootstrap_timeout = bootstrap_timeout
        self.state = SyncState.UNINITIALIZED
        self.structure_notice = NoticeFlag.CLEAR
        # Set once a non-empty structure was loaded or pushed. Until then an
        # empty structure is never pushed over the remote one.
        self.pushed_non_empty = has_structure
        self.remote_structure_missing = False
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='sync')
        self._lock = threading.Lock()
        self._pending = set()

    @property
    def configured(self):
        return self.remote.configured

    @property
    def ready(self):
        return self.state is SyncState.READY

    # --- Bootstrap ---

    def bootstrap(self, store):
        """
        Merges the remote state into ``store``. Structure is replaced, evaluations
        are merged by id (remote wins), the admin password is replaced. Any
        failure keeps the local data untouched. The engine is READY afterwards
        whatever happened.
        """
        if self.state is not SyncState.UNINITIALIZED:
            return self.state
        if not self.configured:
            logger.info('No remote store configured, skipping bootstrap')
            self.state = SyncState.READY
            return self.state

        self.state = SyncState.BOOTSTRAPPING
        structure_loaded = False
        try:
            structure, tree, password = self._fetch_all()
            structure_loaded = self._apply(store, structure, tree, password)
        except Exception as exc:
            # Any backend error or malformed remote record: local data stays as it was
            logger.warning('Bootstrap from remote store failed, keeping local data: %r', exc)
            self.notifier.error(BOOTSTRAP_FAILED_MESSAGE)
        finally:
            self.state = SyncState.READY

        if not structure_loaded and self.remote_structure_missing:
            # Nothing on the server yet: seed it with what we have locally
            self.structure_changed(store.structure_snapshot())
        return self.state

    def _fetch_all(self):
        futures = [
            self._executor.submit(self.remote.fetch_structure_snapshot),
            self._executor.submit(self.remote.fetch_evaluations_snapshot),
            self._executor.submit(self.remote.fetch_admin_password),
        ]
        done, not_done = wait(futures, timeout=self.bootstrap_timeout)
        if not_done:
            for future in not_done:
                future.cancel()
            raise TimeoutError(f'remote fetch did not finish within {self.bootstrap_timeout}s')
        # Re-raises the first fetch error, in which case nothing gets merged
        return tuple(future.result() for future in futures)

    def _apply(self, store, structure, tree, password):
        """Writes the fetched state in one transaction. On error it is rolled back and re-raised."""
        self.remote_structure_missing = structure is None
        collections = None
        try:
            if structure is not None:
                collections = {
                    key: structure.get(key) for key in STRUCTURE_KEYS if isinstance(structure.get(key), list)
                }
                store.replace_structure(commit=False, **collections)
            flattened = flatten_evaluations_tree(tree)
            merged = store.merge_evaluations(flattened, commit=False) if flattened else 0
            if password:
                store.set_admin_password(str(password), commit=False)
            store.commit()
        except Exception:
            store.rollback()
            raise

        if collections is not None:
            if any(collections.values()):
                self.pushed_non_empty = True
            logger.info('Loaded structure from remote: %s', {k: len(v) for k, v in collections.items()})
        if merged:
            logger.info('Merged %d remote evaluations', merged)
        return collections is not None

    # --- Pushes ---

    def structure_changed(self, snapshot):
        """Pushes the structure snapshot taken right after a local change. Returns the Future, or None when skipped."""
        if not self.configured or not self.ready:
            return None
        has_data = any(snapshot.get(key) for key in STRUCTURE_KEYS)
        if not has_data and not self.pushed_non_empty:
            logger.debug('Skipping push of empty structure')
            return None
        if has_data:
            self.pushed_non_empty = True
        return self._submit(self._push_structure, snapshot)

    def _push_structure(self, snapshot):
        try:
            self.remote.push_structure_snapshot(snapshot)
        except RemoteStoreError as exc:
            logger.warning('Structure push failed: %s', exc)
            with self._lock:
                # One notice per failure streak
                if self.structure_notice is NoticeFlag.CLEAR:
                    self.notifier.error(STRUCTURE_PUSH_FAILED_MESSAGE, title=STRUCTURE_PUSH_FAILED_TITLE)
                    self.structure_notice = NoticeFlag.SHOWN
            return False
        with self._lock:
            self.structure_notice = NoticeFlag.CLEAR
        return True

    def evaluation_saved(self, evaluation, owner=None):
        """
        Pushes one evaluation (as a dict). Every failure is reported, to
        ``owner`` only when given (the client that submitted it).
        """
        if not self.configured:
            return None
        return self._submit(self._push_evaluation, evaluation, owner)

    def _push_evaluation(self, evaluation, owner=None):
        try:
            self.remote.push_evaluation(evaluation)
        except RemoteStoreError as exc:
            logger.warning('Push of evaluation %s failed: %s', evaluation.get('id'), exc)
            self.notifier.error(EVALUATION_PUSH_FAILED_MESSAGE, title=EVALUATION_PUSH_FAILED_TITLE, owner=owner)
            return False
        return True

    def password_changed(self, password):
        if not self.configured:
            return None
        return self._submit(self._save_password, password)

    def _save_password(self, password):
        try:
            self.remote.save_admin_password(password)
        except RemoteStoreError as exc:
            logger.warning('Saving admin password to remote store failed: %s', exc)
            return False
        return True

    # --- Executor plumbing ---

    def _submit(self, fn, *args):
        future = self._executor.submit(fn, *args)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def _forget(self, future):
        with self._lock:
            self._pending.discard(future)

    def drain(self, timeout=None):
        """Waits for in-flight pushes. Returns True when none is left."""
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait_for_pushes=True):
        self._executor.shutdown(wait=wait_for_pushes)

    def status(self):
        return {
            'state': self.state.value,
            'configured': self.configured,
            'pendingPushes': len(self._pending),
            'structureNotice': self.structure_notice.value,
        }
