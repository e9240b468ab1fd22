from congregate.extensions import db
from datetime import datetime

REPEAT_CHOICES = ('day', 'week', 'month')

class Booking(db.Model):
    """A stored booking definition.

    One-time bookings carry a ``date``. Recurring bookings carry ``repeat``
    and ``day_repeat`` (weekday 0=Sunday..6 for day/week, day of month for
    month) and leave ``date`` empty.
    """
    __tablename__ = 'bookings'

    id = db.Column(db.Integer, primary_key=True)
    description = db.Column(db.String(255), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    room_id = db.Column(db.Integer, db.ForeignKey('rooms.id'), nullable=False, index=True)

    date = db.Column(db.Date, nullable=True, index=True)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)

    repeat = db.Column(db.String(10), nullable=True) # None, day, week, month
    day_repeat = db.Column(db.Integer, nullable=True)

    room = db.relationship('Room', back_populates='bookings')
    user = db.relationship('User', back_populates='bookings')

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'description': self.description,
            'room_id': self.room_id,
            'user_id': self.user_id,
            'date': self.date.isoformat() if self.date else None,
            'start_time': self.start_time.strftime('%H:%M:%S'),
            'end_time': self.end_time.strftime('%H:%M:%S'),
            'repeat': self.repeat,
            'day_repeat': self.day_repeat
        }
