# models/member.py

from extensions import db


class Member(db.Model):
    __tablename__ = 'members'
    # Member ids only need to be unique inside their group
    pk = db.Column(db.Integer, primary_key=True)
    id = db.Column(db.String(64), nullable=False)
    group_id = db.Column(db.String(64), db.ForeignKey('groups.id', ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String, nullable=False)
    icon = db.Column(db.Text, nullable=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        db.UniqueConstraint('group_id', 'id', name='unique_group_member'),
    )

    def to_dict(self):
        data = {'id': self.id, 'name': self.name}
        if self.icon is not None:
            data['icon'] = self.icon
        return data

    @classmethod
    def from_dict(cls, data, position=0):
        return cls(id=str(data['id']), name=data.get('name') or '', icon=data.get('icon'), position=position)
