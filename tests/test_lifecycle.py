"""Tests for event deadline rules."""

from datetime import date, datetime, timedelta

from lifecycle import effective_deadline, is_closed, partition_events
from models import Event


def make_event(event_id, day, deadline=None):
    return Event(id=event_id, name=event_id, date=day, response_deadline=deadline)


class TestDeadline:
    def test_deadline_defaults_to_event_date(self):
        assert effective_deadline(make_event('e1', '2024-03-10')) == '2024-03-10'
        assert effective_deadline(make_event('e1', '2024-03-10', '2024-03-15')) == '2024-03-15'

    def test_open_until_tomorrow_closed_since_yesterday(self):
        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        yesterday = (date.today() - timedelta(days=1)).isoformat()

        assert is_closed(make_event('e1', yesterday, tomorrow)) is False
        assert is_closed(make_event('e2', yesterday, yesterday)) is True

    def test_deadline_day_stays_open_until_end_of_day(self):
        event = make_event('e1', '2024-01-01')

        assert is_closed(event, now=datetime(2024, 1, 1, 23, 59, 58)) is False
        assert is_closed(event, now=datetime(2024, 1, 2, 0, 0, 0)) is True

    def test_event_without_date_never_closes(self):
        assert is_closed(make_event('e1', '')) is False


class TestPartition:
    def test_split_and_sorted_newest_first(self):
        now = datetime(2024, 6, 1, 12, 0)
        events = [
            make_event('old', '2024-01-01'),
            make_event('next', '2024-06-10'),
            make_event('recent_past', '2024-05-01'),
            make_event('today', '2024-06-01'),
        ]

        ongoing, past = partition_events(events, now=now)

        assert [e.id for e in ongoing] == ['next', 'today']
        assert [e.id for e in past] == ['recent_past', 'old']

    def test_same_day_keeps_original_order(self):
        now = datetime(2024, 1, 1)
        events = [make_event('a', '2024-02-01'), make_event('b', '2024-02-01'), make_event('c', '2024-02-01')]

        ongoing, past = partition_events(events, now=now)

        assert [e.id for e in ongoing] == ['a', 'b', 'c']
        assert past == []

    def test_extended_deadline_keeps_past_event_open(self):
        now = datetime(2024, 6, 1)
        event = make_event('late', '2024-05-01', '2024-06-30')

        ongoing, past = partition_events([event], now=now)

        assert ongoing == [event]
