# storage.py
# Local store: the SQLAlchemy database used as the offline source of truth

from models import Event, Group, Member, Criterion, Evaluation, Setting

STRUCTURE_KEYS = ('events', 'groups', 'criteria')

LAST_EVALUATOR_NAME = 'last_evaluator_name'
THEME = 'theme'
ADMIN_PASSWORD = 'admin_password'

THEMES = ('light', 'dark')


def normalize_name(name):
    return (name or '').strip().lower()


class LocalStore:
    """
    Synchronous access to the four collections and the scalar preferences.
    Every write method commits before returning, so callers can push to the
    remote store knowing the local copy is already durable.
    """

    def __init__(self, session, default_admin_password='admin'):
        self.session = session
        self.default_admin_password = default_admin_password

    # --- Structure (events, groups, criteria) ---

    def events(self):
        return Event.query.order_by(Event.position).all()

    def groups(self, event_id=None):
        query = Group.query
        if event_id is not None:
            query = query.filter_by(event_id=event_id)
        return query.order_by(Group.position).all()

    def criteria(self, event_id=None):
        query = Criterion.query
        if event_id is not None:
            query = query.filter_by(event_id=event_id)
        return query.order_by(Criterion.position).all()

    def structure_snapshot(self):
        return {
            'events': [e.to_dict() for e in self.events()],
            'groups': [g.to_dict() for g in self.groups()],
            'criteria': [c.to_dict() for c in self.criteria()],
        }

    def has_structure(self):
        return any(model.query.first() is not None for model in (Event, Group, Criterion))

    def next_position(self, model):
        last = self.session.query(model.position).order_by(model.position.desc()).first()
        return last[0] + 1 if last else 0

    def replace_structure(self, events=None, groups=None, criteria=None, commit=True):
        """
        Wholesale replacement of each collection given as a list of dicts. None
        leaves it untouched. With commit=False the changes are only flushed.
        """
        if groups is not None:
            Member.query.delete()
            Group.query.delete()
        if criteria is not None:
            Criterion.query.delete()
        if events is not None:
            # Bulk deletes skip ORM cascades, children above were handled explicitly
            Event.query.delete()
        self.session.flush()

        if events is not None:
            self.session.add_all(Event.from_dict(d, position=i) for i, d in enumerate(events))
        if groups is not None:
            self.session.add_all(Group.from_dict(d, position=i) for i, d in enumerate(groups))
        if criteria is not None:
            self.session.add_all(Criterion.from_dict(d, position=i) for i, d in enumerate(criteria))
        self._finish(commit)

    def _finish(self, commit):
        if commit:
            self.session.commit()
        else:
            self.session.flush()

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()

    def clear_all(self):
        """Removes every event, group, criterion and evaluation."""
        Evaluation.query.delete()
        Member.query.delete()
        Group.query.delete()
        Criterion.query.delete()
        Event.query.delete()
        self.session.commit()

    # --- Evaluations ---

    def all_evaluations(self):
        return Evaluation.query.order_by(Evaluation.timestamp).all()

    def evaluations_for_event(self, event_id):
        return Evaluation.query.filter_by(event_id=event_id).order_by(Evaluation.timestamp).all()

    def find_evaluation(self, event_id, group_id, evaluator_name):
        """Existing evaluation of this evaluator for the group. Names match ignoring case and surrounding spaces."""
        wanted = normalize_name(evaluator_name)
        if not wanted:
            return None
        for evaluation in Evaluation.query.filter_by(event_id=event_id, group_id=group_id):
            if normalize_name(evaluation.evaluator_name) == wanted:
                return evaluation
        return None

    def save_evaluation(self, evaluation):
        self.session.add(evaluation)
        self.session.commit()
        return evaluation

    def merge_evaluations(self, records, commit=True):
        """
        Merges evaluation dicts by id: incoming records overwrite local ones
        with the same id, local-only evaluations are kept.
        """
        merged = {}
        for record in records:
            merged[str(record['id'])] = record
        for record in merged.values():
            self.session.merge(Evaluation.from_dict(record))
        self._finish(commit)
        return len(merged)

    # --- Preferences ---

    def _get_setting(self, key, default=None):
        setting = self.session.get(Setting, key)
        return setting.value if setting is not None and setting.value is not None else default

    def _set_setting(self, key, value, commit=True):
        setting = self.session.get(Setting, key)
        if setting is None:
            self.session.add(Setting(key=key, value=value))
        else:
            setting.value = value
        self._finish(commit)

    @property
    def last_evaluator_name(self):
        return self._get_setting(LAST_EVALUATOR_NAME, '')

    @last_evaluator_name.setter
    def last_evaluator_name(self, value):
        self._set_setting(LAST_EVALUATOR_NAME, value)

    @property
    def theme(self):
        return self._get_setting(THEME, 'light')

    @theme.setter
    def theme(self, value):
        if value not in THEMES:
            raise ValueError(f'Unknown theme: {value}')
        self._set_setting(THEME, value)

    @property
    def admin_password(self):
        return self._get_setting(ADMIN_PASSWORD, self.default_admin_password)

    @admin_password.setter
    def admin_password(self, value):
        self.set_admin_password(value)

    def set_admin_password(self, value, commit=True):
        self._set_setting(ADMIN_PASSWORD, value, commit=commit)
