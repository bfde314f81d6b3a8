# models/event.py

from extensions import db


class Event(db.Model):
    __tablename__ = 'events'
    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String, nullable=False)
    date = db.Column(db.String(10), nullable=False)  # YYYY-MM-DD
    response_deadline = db.Column(db.String(10), nullable=True)
    icon = db.Column(db.Text, nullable=True)  # icon name or data: URI
    description = db.Column(db.Text, nullable=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    # Deleting an event removes its groups and criteria. Evaluations are left alone.
    groups = db.relationship('Group', backref='event', lazy=True, cascade="all, delete-orphan",
                             order_by='Group.position')
    criteria = db.relationship('Criterion', backref='event', lazy=True, cascade="all, delete-orphan",
                               order_by='Criterion.position')

    def to_dict(self):
        data = {'id': self.id, 'name': self.name, 'date': self.date}
        if self.response_deadline:
            data['responseDeadline'] = self.response_deadline
        if self.icon is not None:
            data['icon'] = self.icon
        if self.description is not None:
            data['description'] = self.description
        return data

    @classmethod
    def from_dict(cls, data, position=0):
        return cls(
            id=str(data['id']),
            name=data.get('name') or '',
            date=data.get('date') or '',
            response_deadline=data.get('responseDeadline') or None,
            icon=data.get('icon'),
            description=data.get('description'),
            position=position,
        )
