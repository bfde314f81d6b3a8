# models/setting.py
# Scalar preferences: last evaluator name, theme, admin password

from extensions import db


class Setting(db.Model):
    __tablename__ = 'settings'
    key = db.Column(db.String(64), primary_key=True)
    value = db.Column(db.Text, nullable=True)
