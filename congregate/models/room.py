from congregate.extensions import db
from datetime import datetime

class Room(db.Model):
    __tablename__ = 'rooms'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    size = db.Column(db.Integer)
    description = db.Column(db.String(500))
    exclusive = db.Column(db.Boolean, default=False)
    status = db.Column(db.Boolean, default=True) # available for booking

    bookings = db.relationship('Booking', back_populates='room', lazy=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'size': self.size,
            'description': self.description,
            'exclusive': self.exclusive,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
