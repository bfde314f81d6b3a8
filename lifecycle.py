# lifecycle.py
# Event deadline rules: whether an event still accepts evaluations

from datetime import date, datetime

END_OF_DAY = 'T23:59:59'


def effective_deadline(event):
    """Deadline of an event: the response deadline, or the event date when none is set."""
    return event.response_deadline or event.date


def deadline_instant(event):
    deadline = effective_deadline(event)
    if not deadline:
        return None
    return datetime.fromisoformat(deadline + END_OF_DAY)


def is_closed(event, now=None):
    """
    An event closes at 23:59:59 (local time) of its effective deadline.
    Events without any date never close.
    """
    closes_at = deadline_instant(event)
    if closes_at is None:
        return False
    if now is None:
        now = datetime.now()
    return closes_at < now


def _event_day(event):
    return date.fromisoformat(event.date) if event.date else date.min


def partition_events(events, now=None):
    """
    Splits events into (ongoing, past). Both lists are ordered by event date,
    newest first; events on the same day keep their original order.
    """
    if now is None:
        now = datetime.now()
    ongoing = []
    past = []
    for event in sorted(events, key=_event_day, reverse=True):
        if is_closed(event, now):
            past.append(event)
        else:
            ongoing.append(event)
    return ongoing, past
