# routes/main.py
# Evaluator endpoints: open events, evaluation form, preferences, notifications

from flask import Blueprint, jsonify, request

import logic
from extensions import get_client_id, get_engine, get_notifier, get_store
from lifecycle import effective_deadline, is_closed, partition_events
from storage import THEMES

main_bp = Blueprint('main', __name__, url_prefix='/api')


def event_summary(event, now=None):
    data = event.to_dict()
    data['deadline'] = effective_deadline(event)
    data['closed'] = is_closed(event, now)
    return data


@main_bp.route('/status')
def status():
    return jsonify(get_engine().status())


@main_bp.route('/events')
def list_events():
    ongoing, past = partition_events(get_store().events())
    return jsonify({
        'ongoing': [event_summary(e) for e in ongoing],
        'past': [event_summary(e) for e in past],
    })


@main_bp.route('/events/<event_id>')
def event_detail(event_id):
    store = get_store()
    event = logic.get_event_or_404(event_id)
    return jsonify({
        'event': event_summary(event),
        'groups': [g.to_dict() for g in store.groups(event_id)],
        'criteria': [c.to_dict() for c in store.criteria(event_id)],
    })


@main_bp.route('/events/<event_id>/groups/<group_id>/evaluation')
def find_evaluation(event_id, group_id):
    # Lets the form load what this evaluator already submitted, for editing
    evaluator = request.args.get('evaluator', '')
    evaluation = logic.existing_evaluation(get_store(), event_id, group_id, evaluator)
    if evaluation is None:
        return jsonify({'evaluation': None}), 404
    return jsonify({'evaluation': evaluation.to_dict()})


@main_bp.route('/events/<event_id>/evaluations', methods=['POST'])
def submit_evaluation(event_id):
    data = request.get_json(silent=True) or {}
    evaluation, updated = logic.submit_evaluation(
        get_store(),
        get_engine(),
        event_id=event_id,
        group_id=data.get('groupId'),
        evaluator_name=data.get('evaluatorName'),
        scores=data.get('scores'),
        individual_scores=data.get('individualScores'),
        group_comment=data.get('groupComment'),
        owner=get_client_id(),
    )
    message = 'Evaluation updated!' if updated else 'Success! Evaluation saved.'
    return jsonify({'evaluation': evaluation.to_dict(), 'updated': updated, 'message': message}), 200 if updated else 201


@main_bp.route('/preferences', methods=['GET', 'PUT'])
def preferences():
    store = get_store()
    if request.method == 'PUT':
        data = request.get_json(silent=True) or {}
        if 'theme' in data:
            if data['theme'] not in THEMES:
                return jsonify({'error': 'InvalidSubmission', 'message': 'Theme must be light or dark.'}), 400
            store.theme = data['theme']
        if 'lastEvaluatorName' in data:
            store.last_evaluator_name = (data['lastEvaluatorName'] or '').strip()
    return jsonify({'theme': store.theme, 'lastEvaluatorName': store.last_evaluator_name})


@main_bp.route('/notifications')
def notifications():
    return jsonify({'notifications': [n.to_dict() for n in get_notifier().drain(owner=get_client_id())]})
