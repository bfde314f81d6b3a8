# models/group.py

from extensions import db
from .member import Member


class Group(db.Model):
    __tablename__ = 'groups'
    id = db.Column(db.String(64), primary_key=True)
    event_id = db.Column(db.String(64), db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String, nullable=False)
    icon = db.Column(db.Text, nullable=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    # Display order of members is insertion order
    members = db.relationship('Member', backref='group', lazy=True, cascade="all, delete-orphan",
                              order_by='Member.position')

    def to_dict(self):
        data = {
            'id': self.id,
            'eventId': self.event_id,
            'name': self.name,
            'members': [m.to_dict() for m in self.members],
        }
        if self.icon is not None:
            data['icon'] = self.icon
        return data

    @classmethod
    def from_dict(cls, data, position=0):
        group = cls(
            id=str(data['id']),
            event_id=str(data.get('eventId') or ''),
            name=data.get('name') or '',
            icon=data.get('icon'),
            position=position,
        )
        group.members = [Member.from_dict(m, position=i) for i, m in enumerate(data.get('members') or [])]
        return group
