# models/criterion.py

from extensions import db


class Criterion(db.Model):
    __tablename__ = 'criteria'
    id = db.Column(db.String(64), primary_key=True)
    event_id = db.Column(db.String(64), db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String, nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    # Always 1 for now, reserved for weighted aggregation
    weight = db.Column(db.Float, nullable=False, default=1)
    position = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            'id': self.id,
            'eventId': self.event_id,
            'name': self.name,
            'description': self.description,
            'weight': self.weight,
        }

    @classmethod
    def from_dict(cls, data, position=0):
        return cls(
            id=str(data['id']),
            event_id=str(data.get('eventId') or ''),
            name=data.get('name') or '',
            description=data.get('description') or '',
            weight=data.get('weight', 1),
            position=position,
        )
