# models/evaluation.py

from extensions import db


class Evaluation(db.Model):
    __tablename__ = 'evaluations'
    id = db.Column(db.String(64), primary_key=True)

    # No foreign keys: evaluations of a deleted event stay behind as orphans
    event_id = db.Column(db.String(64), nullable=False, index=True)
    group_id = db.Column(db.String(64), nullable=False, index=True)

    evaluator_name = db.Column(db.String, nullable=False)
    scores = db.Column(db.JSON, nullable=False, default=dict)  # criterion_id -> 0..10
    individual_scores = db.Column(db.JSON, nullable=False, default=dict)  # member_id -> 0..10
    group_comment = db.Column(db.Text, nullable=True)
    timestamp = db.Column(db.BigInteger, nullable=False)  # epoch millis

    def to_dict(self):
        data = {
            'id': self.id,
            'eventId': self.event_id,
            'groupId': self.group_id,
            'evaluatorName': self.evaluator_name,
            'scores': dict(self.scores or {}),
            'individualScores': dict(self.individual_scores or {}),
            'timestamp': self.timestamp,
        }
        if self.group_comment:
            data['groupComment'] = self.group_comment
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data['id']),
            event_id=str(data.get('eventId') or ''),
            group_id=str(data.get('groupId') or ''),
            evaluator_name=data.get('evaluatorName') or '',
            scores=dict(data.get('scores') or {}),
            individual_scores=dict(data.get('individualScores') or {}),
            group_comment=data.get('groupComment') or None,
            timestamp=int(data.get('timestamp') or 0),
        )
