"""Tests for the local store."""

import pytest

from extensions import db, get_store
from models import Event, Evaluation, Group
from remote import flatten_evaluations_tree


def evaluation_dict(eval_id, group_id='G1', event_id='E1', name='Ana', scores=None, ts=1):
    return {
        'id': eval_id, 'eventId': event_id, 'groupId': group_id, 'evaluatorName': name,
        'scores': scores or {'c1': 5}, 'individualScores': {}, 'timestamp': ts,
    }


STRUCTURE = {
    'events': [{'id': 'E1', 'name': 'Demo', 'date': '2024-01-01', 'responseDeadline': '2024-01-05'}],
    'groups': [{'id': 'G1', 'eventId': 'E1', 'name': 'Alpha', 'icon': 'Users',
                'members': [{'id': 'm1', 'name': 'Ana'}, {'id': 'm2', 'name': 'Bruno'}]}],
    'criteria': [{'id': 'c1', 'eventId': 'E1', 'name': 'Pitch', 'description': 'Talk', 'weight': 1}],
}


@pytest.fixture
def store(app):
    with app.app_context():
        yield get_store()


class TestStructure:
    def test_empty_initial_state(self, store):
        assert store.structure_snapshot() == {'events': [], 'groups': [], 'criteria': []}
        assert store.all_evaluations() == []
        assert store.has_structure() is False

    def test_replace_structure_round_trips(self, store):
        store.replace_structure(**STRUCTURE)

        assert store.structure_snapshot() == STRUCTURE
        assert store.has_structure() is True

    def test_replace_is_wholesale(self, store):
        store.replace_structure(**STRUCTURE)
        store.replace_structure(events=[], groups=[], criteria=[])

        assert store.structure_snapshot() == {'events': [], 'groups': [], 'criteria': []}

    def test_none_leaves_collection_untouched(self, store):
        store.replace_structure(**STRUCTURE)
        store.replace_structure(criteria=[])

        snapshot = store.structure_snapshot()
        assert snapshot['events'] == STRUCTURE['events']
        assert snapshot['groups'] == STRUCTURE['groups']
        assert snapshot['criteria'] == []

    def test_deleting_event_cascades_but_keeps_evaluations(self, store):
        store.replace_structure(**STRUCTURE)
        store.merge_evaluations([evaluation_dict('ev1')])

        db.session.delete(db.session.get(Event, 'E1'))
        db.session.commit()

        assert store.structure_snapshot() == {'events': [], 'groups': [], 'criteria': []}
        assert Group.query.count() == 0
        assert [e.id for e in store.all_evaluations()] == ['ev1']


class TestEvaluationMerge:
    def test_merge_into_empty_yields_flattened_set(self, store):
        tree = {
            'E1': {'G1': {'a': evaluation_dict('a'), 'b': evaluation_dict('b', name='Bia')},
                   'G2': {'c': evaluation_dict('c', group_id='G2')}},
            'E2': {'G3': {'d': evaluation_dict('d', event_id='E2', group_id='G3')}},
        }
        flattened = flatten_evaluations_tree(tree)

        store.merge_evaluations(flattened)

        stored = {e.id: e.to_dict() for e in store.all_evaluations()}
        assert stored == {record['id']: record for record in flattened}

    def test_remote_wins_and_local_only_survives(self, store):
        store.merge_evaluations([evaluation_dict('shared', scores={'c1': 1}), evaluation_dict('local', name='Bia')])

        store.merge_evaluations([evaluation_dict('shared', scores={'c1': 9}, ts=2)])

        stored = {e.id: e for e in store.all_evaluations()}
        assert set(stored) == {'shared', 'local'}
        assert stored['shared'].scores == {'c1': 9}
        assert stored['shared'].timestamp == 2

    def test_find_evaluation_ignores_case_and_spaces(self, store):
        store.merge_evaluations([evaluation_dict('a', name='Maria Souza')])

        assert store.find_evaluation('E1', 'G1', '  maria SOUZA ').id == 'a'
        assert store.find_evaluation('E1', 'G2', 'maria souza') is None
        assert store.find_evaluation('E1', 'G1', '   ') is None


class TestPreferences:
    def test_defaults(self, store):
        assert store.theme == 'light'
        assert store.last_evaluator_name == ''
        assert store.admin_password == 'admin'

    def test_values_persist(self, store):
        store.theme = 'dark'
        store.last_evaluator_name = 'Ana'
        store.admin_password = 'secret'

        assert store.theme == 'dark'
        assert store.last_evaluator_name == 'Ana'
        assert store.admin_password == 'secret'

    def test_unknown_theme_rejected(self, store):
        with pytest.raises(ValueError):
            store.theme = 'sepia'

    def test_clear_all(self, store):
        store.replace_structure(**STRUCTURE)
        store.merge_evaluations([evaluation_dict('a')])

        store.clear_all()

        assert store.has_structure() is False
        assert Evaluation.query.count() == 0
