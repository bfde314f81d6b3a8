# notifications.py
# Queue of user-facing messages produced by the core (toasts and modals).
# Sync results arrive on worker threads, so the client drains this queue.

import threading
from collections import deque
from dataclasses import dataclass, field
import time

SUCCESS = 'success'
ERROR = 'error'
INFO = 'info'


@dataclass
class Notice:
    level: str
    message: str
    title: str = None
    # Client the notice is meant for; None means every client
    owner: str = None
    created_at: int = field(default_factory=lambda: int(time.time() * 1000))

    def to_dict(self):
        return {'type': self.level, 'title': self.title, 'message': self.message, 'createdAt': self.created_at}

    def visible_to(self, owner):
        return self.owner is None or self.owner == owner


class Notifier:
    def __init__(self, maxlen=100):
        self._notices = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def notify(self, level, message, title=None, owner=None):
        notice = Notice(level=level, message=message, title=title, owner=owner)
        with self._lock:
            self._notices.append(notice)
        return notice

    def error(self, message, title=None, owner=None):
        return self.notify(ERROR, message, title, owner)

    def info(self, message, title=None, owner=None):
        return self.notify(INFO, message, title, owner)

    def success(self, message, title=None, owner=None):
        return self.notify(SUCCESS, message, title, owner)

    def pending(self):
        with self._lock:
            return list(self._notices)

    def drain(self, owner=None):
        """
        Removes and returns the notices for ``owner`` plus the ones meant for
        everybody. Notices addressed to other clients stay queued.
        """
        with self._lock:
            taken = [n for n in self._notices if n.visible_to(owner)]
            kept = [n for n in self._notices if not n.visible_to(owner)]
            self._notices.clear()
            self._notices.extend(kept)
        return taken
