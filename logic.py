# logic.py
# Evaluation submission and admin edits of the event structure.
# Every function commits to the local store first, then hands the change to the sync engine.

import hmac
import logging
import time
import uuid
from datetime import date as Date

from errors import EventClosed, InvalidSubmission, NotFound
from extensions import db
from lifecycle import is_closed
from models import Event, Group, Member, Criterion, Evaluation
from storage import normalize_name

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 10
MIN_PASSWORD_LENGTH = 4

DEFAULT_EVENT_ICON = 'Calendar'
DEFAULT_GROUP_ICON = 'Users'
DEFAULT_MEMBER_ICON = 'User'
DEFAULT_CRITERION_DESCRIPTION = 'No description'

DEFAULT_CRITERIA = [
    ('c1', 'Pitch', 'Clear communication, speaking, time management and ability to sell the idea.'),
    ('c2', 'Prototype', 'Functionality, finish, UX/UI and development stage of the presented solution.'),
    ('c3', 'Creativity', 'Originality of the solution and unique approach to the problem.'),
    ('c4', 'Innovation', 'Potential impact, use of new technologies or methods, and market viability.'),
]


def passwords_match(given, expected):
    return hmac.compare_digest(str(given or '').encode(), str(expected or '').encode())


def now_millis():
    return int(time.time() * 1000)


def new_id(prefix=None):
    token = uuid.uuid4().hex[:16]
    return f'{prefix}_{token}' if prefix else token


def _require(value, message, title='Required fields'):
    if not value or not str(value).strip():
        raise InvalidSubmission(message, title=title)
    return value


def _parse_day(value, label):
    """Normalizes a calendar day to YYYY-MM-DD, rejecting anything else."""
    try:
        return Date.fromisoformat(str(value).strip()).isoformat()
    except ValueError:
        raise InvalidSubmission(f'The {label} must be a date in YYYY-MM-DD format.', title='Invalid date')


def _check_deadline(date, deadline):
    # Calendar days compare correctly as YYYY-MM-DD strings
    if deadline and date and deadline < date:
        raise InvalidSubmission('The response deadline cannot be before the event date.', title='Invalid deadline')


def _push_structure(store, engine):
    engine.structure_changed(store.structure_snapshot())


def get_event_or_404(event_id):
    event = db.session.get(Event, event_id)
    if event is None:
        raise NotFound(f'Event {event_id} not found.', title='Not found')
    return event


def get_group_or_404(group_id, event_id=None):
    group = db.session.get(Group, group_id)
    if group is None or (event_id is not None and group.event_id != event_id):
        raise NotFound(f'Group {group_id} not found.', title='Not found')
    return group


# --- Evaluations ---

def _validate_scores(scores, allowed_ids, label):
    if scores is None:
        return {}
    if not isinstance(scores, dict):
        raise InvalidSubmission(f'{label} must be a mapping of id to score.')
    cleaned = {}
    for key, value in scores.items():
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidSubmission(f'{label} for {key} must be a number.')
        if not MIN_SCORE <= value <= MAX_SCORE:
            raise InvalidSubmission(f'{label} for {key} must be between {MIN_SCORE} and {MAX_SCORE}.')
        if allowed_ids is not None and key not in allowed_ids:
            raise InvalidSubmission(f'Unknown id in {label.lower()}: {key}.')
        cleaned[key] = value
    return cleaned


def submit_evaluation(store, engine, event_id, group_id, evaluator_name, scores=None,
                      individual_scores=None, group_comment=None, now=None, owner=None):
    """
    Records one evaluator's scores for a group. If the same evaluator (name
    compared ignoring case and surrounding spaces) already evaluated this
    group, that evaluation is rewritten in place instead of adding a new one.

    Returns (evaluation, updated). A failed push is reported to ``owner`` only.
    """
    _require(evaluator_name, 'Please enter your name to continue.', title='Name required')
    _require(group_id, 'Please pick a group before submitting.', title='Group required')
    evaluator_name = str(evaluator_name).strip()

    event = db.session.get(Event, event_id)
    if event is None or is_closed(event, now):
        raise EventClosed(event_id)
    group = get_group_or_404(group_id, event_id)

    criterion_ids = {c.id for c in store.criteria(event_id)}
    member_ids = {m.id for m in group.members}
    scores = _validate_scores(scores, criterion_ids, 'Score')
    individual_scores = _validate_scores(individual_scores, member_ids, 'Individual score')
    comment = (group_comment or '').strip() or None

    evaluation = store.find_evaluation(event_id, group_id, evaluator_name)
    updated = evaluation is not None
    if evaluation is None:
        evaluation = Evaluation(id=new_id(), event_id=event_id, group_id=group_id)
    # Full replace, never a partial merge of the previous scores
    evaluation.evaluator_name = evaluator_name
    evaluation.scores = scores
    evaluation.individual_scores = individual_scores
    evaluation.group_comment = comment
    evaluation.timestamp = now_millis()
    store.save_evaluation(evaluation)
    store.last_evaluator_name = evaluator_name

    logger.info('%s evaluation %s for group %s (event %s)',
                'Updated' if updated else 'Created', evaluation.id, group_id, event_id)
    engine.evaluation_saved(evaluation.to_dict(), owner=owner)
    return evaluation, updated


def existing_evaluation(store, event_id, group_id, evaluator_name):
    if not normalize_name(evaluator_name) or not group_id or not event_id:
        return None
    return store.find_evaluation(event_id, group_id, evaluator_name)


# --- Events ---

def default_criteria(event_id):
    return [
        Criterion(id=new_id(prefix), event_id=event_id, name=name, description=description, weight=1)
        for prefix, name, description in DEFAULT_CRITERIA
    ]


def create_event(store, engine, name, date, response_deadline=None, icon=None, description=None):
    _require(name, 'Enter the event name before saving.')
    date = _parse_day(_require(date, 'Enter the event date before saving.'), 'event date')
    deadline = _parse_day(response_deadline, 'response deadline') if response_deadline else date
    _check_deadline(date, deadline)

    event = Event(
        id=new_id(), name=name.strip(), date=date, response_deadline=deadline,
        icon=icon or DEFAULT_EVENT_ICON, description=description,
        position=store.next_position(Event),
    )
    store.session.add(event)
    position = store.next_position(Criterion)
    for offset, criterion in enumerate(default_criteria(event.id)):
        criterion.position = position + offset
        store.session.add(criterion)
    store.commit()
    logger.info('Created event %s (%s)', event.id, event.name)
    _push_structure(store, engine)
    return event


def update_event(store, engine, event_id, **changes):
    """
    Applies name/icon/description/date/responseDeadline changes. Moving the
    date past the deadline pulls the deadline along; clearing the deadline
    resets it to the event date.
    """
    event = get_event_or_404(event_id)
    if 'name' in changes:
        event.name = _require(changes['name'], 'The event name cannot be empty.').strip()
    if 'icon' in changes:
        event.icon = changes['icon'] or DEFAULT_EVENT_ICON
    if 'description' in changes:
        event.description = changes['description']
    if changes.get('date'):
        event.date = _parse_day(changes['date'], 'event date')
        if not event.response_deadline or event.response_deadline < event.date:
            event.response_deadline = event.date
    if 'responseDeadline' in changes:
        deadline = changes['responseDeadline']
        deadline = _parse_day(deadline, 'response deadline') if deadline else event.date
        _check_deadline(event.date, deadline)
        event.response_deadline = deadline
    store.commit()
    _push_structure(store, engine)
    return event


def delete_event(store, engine, event_id):
    """Deletes the event with its groups and criteria. Its evaluations stay as orphans."""
    event = get_event_or_404(event_id)
    store.session.delete(event)
    store.commit()
    logger.info('Deleted event %s', event_id)
    _push_structure(store, engine)


# --- Groups and members ---

def add_group(store, engine, event_id, name, icon=None):
    get_event_or_404(event_id)
    _require(name, 'Enter the group name before saving.')
    group = Group(id=new_id('g'), event_id=event_id, name=name.strip(), icon=icon or DEFAULT_GROUP_ICON,
                  position=store.next_position(Group))
    store.session.add(group)
    store.commit()
    _push_structure(store, engine)
    return group


def update_group(store, engine, group_id, **changes):
    group = get_group_or_404(group_id)
    if 'name' in changes:
        group.name = _require(changes['name'], 'The group name cannot be empty.').strip()
    if 'icon' in changes:
        group.icon = changes['icon'] or DEFAULT_GROUP_ICON
    store.commit()
    _push_structure(store, engine)
    return group


def delete_group(store, engine, group_id):
    group = get_group_or_404(group_id)
    store.session.delete(group)
    store.commit()
    _push_structure(store, engine)


def _get_member_or_404(group, member_id):
    for member in group.members:
        if member.id == member_id:
            return member
    raise NotFound(f'Member {member_id} not found.', title='Not found')


def add_member(store, engine, group_id, name, icon=None):
    group = get_group_or_404(group_id)
    _require(name, 'Enter the member name before saving.')
    position = max((m.position for m in group.members), default=-1) + 1
    member = Member(id=new_id('m'), name=name.strip(), icon=icon or DEFAULT_MEMBER_ICON, position=position)
    group.members.append(member)
    store.commit()
    _push_structure(store, engine)
    return member


def update_member(store, engine, group_id, member_id, **changes):
    group = get_group_or_404(group_id)
    member = _get_member_or_404(group, member_id)
    if 'name' in changes:
        member.name = _require(changes['name'], 'The member name cannot be empty.').strip()
    if 'icon' in changes:
        member.icon = changes['icon'] or DEFAULT_MEMBER_ICON
    store.commit()
    _push_structure(store, engine)
    return member


def remove_member(store, engine, group_id, member_id):
    group = get_group_or_404(group_id)
    member = _get_member_or_404(group, member_id)
    group.members.remove(member)
    store.commit()
    _push_structure(store, engine)


# --- Criteria ---

def add_criterion(store, engine, event_id, name, description=None):
    get_event_or_404(event_id)
    _require(name, 'Enter the criterion name before saving.')
    criterion = Criterion(
        id=new_id('c'), event_id=event_id, name=name.strip(),
        description=(description or '').strip() or DEFAULT_CRITERION_DESCRIPTION, weight=1,
        position=store.next_position(Criterion),
    )
    store.session.add(criterion)
    store.commit()
    _push_structure(store, engine)
    return criterion


def delete_criterion(store, engine, criterion_id):
    criterion = db.session.get(Criterion, criterion_id)
    if criterion is None:
        raise NotFound(f'Criterion {criterion_id} not found.', title='Not found')
    store.session.delete(criterion)
    store.commit()
    _push_structure(store, engine)


# --- Admin ---

def reset_all(store, engine):
    """Wipes every event, group, criterion and evaluation. Remote evaluations are not deleted."""
    store.clear_all()
    logger.warning('Local data reset by admin')
    _push_structure(store, engine)


def change_admin_password(store, engine, current, new, confirmation):
    if not passwords_match(current, store.admin_password):
        raise InvalidSubmission('The current password does not match. Try again.', title='Wrong password')
    if not new or len(new) < MIN_PASSWORD_LENGTH:
        raise InvalidSubmission(f'Choose a new password with at least {MIN_PASSWORD_LENGTH} characters.',
                                title='Password too short')
    if new != confirmation:
        raise InvalidSubmission('The confirmation must match the new password.', title='Invalid confirmation')
    store.admin_password = new
    engine.password_changed(new)
