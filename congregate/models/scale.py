from congregate.extensions import db
from datetime import datetime

# Volunteer roles filled by free-text names
ROLE_FIELDS = (
    'projection', 'light', 'transmission', 'camera', 'live', 'sound',
    'training_sound', 'photography', 'stories', 'dynamic'
)

class Scale(db.Model):
    __tablename__ = 'scales'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    description = db.Column(db.String(255))

    direction_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False)
    band_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=True)
    direction = db.relationship('Member', foreign_keys=[direction_id])
    band = db.relationship('Member', foreign_keys=[band_id])

    projection = db.Column(db.String(100))
    light = db.Column(db.String(100))
    transmission = db.Column(db.String(100))
    camera = db.Column(db.String(100))
    live = db.Column(db.String(100))
    sound = db.Column(db.String(100))
    training_sound = db.Column(db.String(100))
    photography = db.Column(db.String(100))
    stories = db.Column(db.String(100))
    dynamic = db.Column(db.String(100))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        data = {
            'id': self.id,
            'name': self.name,
            'date': self.date.strftime('%d/%m/%Y'),
            'description': self.description,
            'direction': {'id': self.direction.id, 'full_name': self.direction.full_name} if self.direction else None,
            'band': {'id': self.band.id, 'full_name': self.band.full_name} if self.band else None
        }
        for field in ROLE_FIELDS:
            data[field] = getattr(self, field)
        return data
