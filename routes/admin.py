# routes/admin.py
# Admin endpoints: event structure editing, results, group feedback, reset, password

from functools import wraps

from flask import Blueprint, current_app, jsonify, request, session

import logic
from errors import InvalidSubmission
from extensions import get_engine, get_store
from feedback import generate_feedback
from lifecycle import effective_deadline, is_closed
from scoring import event_results, group_evaluations

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')

EVENT_FIELDS = ('name', 'icon', 'description', 'date', 'responseDeadline')
GROUP_FIELDS = ('name', 'icon')
MEMBER_FIELDS = ('name', 'icon')


def admin_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if session.get('user_role') != 'admin':
            return jsonify({'error': 'Forbidden', 'message': 'You do not have access to this page.'}), 403
        return f(*args, **kwargs)
    return decorated_function


def _payload():
    return request.get_json(silent=True) or {}


def _changes(data, fields):
    return {key: data[key] for key in fields if key in data}


# --- Events ---

@admin_bp.route('/events', methods=['POST'])
@admin_required
def create_event():
    data = _payload()
    event = logic.create_event(
        get_store(), get_engine(),
        name=data.get('name'),
        date=data.get('date'),
        response_deadline=data.get('responseDeadline'),
        icon=data.get('icon'),
        description=data.get('description'),
    )
    return jsonify({
        'event': event.to_dict(),
        'criteria': [c.to_dict() for c in event.criteria],
        'message': f'Event "{event.name}" created.',
    }), 201


@admin_bp.route('/events/<event_id>', methods=['PATCH'])
@admin_required
def update_event(event_id):
    event = logic.update_event(get_store(), get_engine(), event_id, **_changes(_payload(), EVENT_FIELDS))
    return jsonify({'event': event.to_dict()})


@admin_bp.route('/events/<event_id>', methods=['DELETE'])
@admin_required
def delete_event(event_id):
    logic.delete_event(get_store(), get_engine(), event_id)
    return jsonify({'deleted': event_id})


@admin_bp.route('/events/<event_id>/results')
@admin_required
def event_results_view(event_id):
    store = get_store()
    event = logic.get_event_or_404(event_id)
    results = event_results(
        event,
        store.groups(event_id),
        store.criteria(event_id),
        store.evaluations_for_event(event_id),
        zero_when_empty=current_app.config['MEMBER_AVERAGE_ZERO_FOR_MISSING'],
    )
    return jsonify({
        'event': event.to_dict(),
        'deadline': effective_deadline(event),
        'closed': is_closed(event),
        'results': results,
    })


@admin_bp.route('/events/<event_id>/groups/<group_id>/feedback', methods=['POST'])
@admin_required
def group_feedback(event_id, group_id):
    store = get_store()
    logic.get_event_or_404(event_id)
    group = logic.get_group_or_404(group_id, event_id)
    evaluations = group_evaluations(group_id, event_id, store.evaluations_for_event(event_id))
    if not evaluations:
        raise InvalidSubmission('This group has no evaluations yet.', title='No evaluations')
    text = generate_feedback(
        current_app.extensions['feedback_client'],
        current_app.config['FEEDBACK_MODEL'],
        group,
        store.criteria(event_id),
        evaluations,
    )
    return jsonify({'groupId': group.id, 'feedback': text})


# --- Groups and members ---

@admin_bp.route('/events/<event_id>/groups', methods=['POST'])
@admin_required
def add_group(event_id):
    data = _payload()
    group = logic.add_group(get_store(), get_engine(), event_id, data.get('name'), icon=data.get('icon'))
    return jsonify({'group': group.to_dict(), 'message': f'Group "{group.name}" added.'}), 201


@admin_bp.route('/groups/<group_id>', methods=['PATCH'])
@admin_required
def update_group(group_id):
    group = logic.update_group(get_store(), get_engine(), group_id, **_changes(_payload(), GROUP_FIELDS))
    return jsonify({'group': group.to_dict()})


@admin_bp.route('/groups/<group_id>', methods=['DELETE'])
@admin_required
def delete_group(group_id):
    logic.delete_group(get_store(), get_engine(), group_id)
    return jsonify({'deleted': group_id})


@admin_bp.route('/groups/<group_id>/members', methods=['POST'])
@admin_required
def add_member(group_id):
    data = _payload()
    member = logic.add_member(get_store(), get_engine(), group_id, data.get('name'), icon=data.get('icon'))
    return jsonify({'member': member.to_dict()}), 201


@admin_bp.route('/groups/<group_id>/members/<member_id>', methods=['PATCH'])
@admin_required
def update_member(group_id, member_id):
    member = logic.update_member(get_store(), get_engine(), group_id, member_id,
                                 **_changes(_payload(), MEMBER_FIELDS))
    return jsonify({'member': member.to_dict()})


@admin_bp.route('/groups/<group_id>/members/<member_id>', methods=['DELETE'])
@admin_required
def remove_member(group_id, member_id):
    logic.remove_member(get_store(), get_engine(), group_id, member_id)
    return jsonify({'deleted': member_id})


# --- Criteria ---

@admin_bp.route('/events/<event_id>/criteria', methods=['POST'])
@admin_required
def add_criterion(event_id):
    data = _payload()
    criterion = logic.add_criterion(get_store(), get_engine(), event_id, data.get('name'),
                                    description=data.get('description'))
    return jsonify({'criterion': criterion.to_dict()}), 201


@admin_bp.route('/criteria/<criterion_id>', methods=['DELETE'])
@admin_required
def delete_criterion(criterion_id):
    logic.delete_criterion(get_store(), get_engine(), criterion_id)
    return jsonify({'deleted': criterion_id})


# --- Settings ---

@admin_bp.route('/reset', methods=['POST'])
@admin_required
def reset():
    logic.reset_all(get_store(), get_engine())
    return jsonify({'reset': True})


@admin_bp.route('/password', methods=['POST'])
@admin_required
def change_password():
    data = _payload()
    logic.change_admin_password(
        get_store(), get_engine(),
        current=data.get('currentPassword'),
        new=data.get('newPassword'),
        confirmation=data.get('confirmPassword'),
    )
    return jsonify({'message': 'Password updated.'})
