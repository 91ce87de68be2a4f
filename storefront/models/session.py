"""
Session Model
"""

from storefront.extensions import db


class SessionRecord(db.Model):
    """Server-held session payload keyed by the opaque cookie id"""
    __tablename__ = 'sessions'

    id = db.Column(db.Integer, primary_key=True)
    sid = db.Column(db.String(64), unique=True, nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'),
                        nullable=True, index=True)
    data = db.Column(db.Text, nullable=False, default='{}')
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    def __repr__(self):
        return f'<SessionRecord {self.sid[:8]}... user:{self.user_id}>'
