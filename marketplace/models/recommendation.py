from datetime import datetime
from marketplace import db

class Recommendation(db.Model):
    __tablename__ = 'recommendations'

    id = db.Column(db.Integer, primary_key=True)
    sender_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    recipient_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    property_id = db.Column(db.Integer, db.ForeignKey('properties.id'), nullable=False)
    message = db.Column(db.Text, nullable=False, default='')
    is_read = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint('sender_id <> recipient_id', name='ck_recommendation_not_self'),
    )

    sender = db.relationship('User', foreign_keys=[sender_id],
                             backref=db.backref('sent_recommendations', lazy='dynamic'))
    recipient = db.relationship('User', foreign_keys=[recipient_id],
                                backref=db.backref('received_recommendations', lazy='dynamic'))

    def involves(self, user_id):
        """Check if user is the sender or the recipient"""
        return user_id in (self.sender_id, self.recipient_id)

    def mark_read(self):
        self.is_read = True

    def to_dict(self, include_sender=False, include_recipient=False, include_property=False):
        data = {
            'id': self.id,
            'sender': self.sender_id,
            'recipient': self.recipient_id,
            'property': self.property_id,
            'message': self.message,
            'isRead': self.is_read,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

        if include_sender and self.sender:
            data['sender'] = self.sender.to_summary()
        if include_recipient and self.recipient:
            data['recipient'] = self.recipient.to_summary()
        if include_property and self.property:
            data['property'] = self.property.to_dict()

        return data

    def __repr__(self):
        return f'<Recommendation {self.sender_id}->{self.recipient_id} property={self.property_id}>'
