from congregate.extensions import db
from datetime import datetime

class Member(db.Model):
    __tablename__ = 'members'

    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(100), nullable=False, index=True)
    birth_date = db.Column(db.Date, nullable=False)
    gender = db.Column(db.String(20), nullable=False)
    cpf = db.Column(db.String(11), unique=True)
    rg = db.Column(db.String(20))
    phone = db.Column(db.String(20), nullable=False)
    email = db.Column(db.String(120), nullable=False)

    # Address
    street = db.Column(db.String(150))
    number = db.Column(db.String(20))
    neighborhood = db.Column(db.String(100))
    city = db.Column(db.String(100))
    state = db.Column(db.String(50))
    cep = db.Column(db.String(8))

    # Family
    mother_name = db.Column(db.String(100))
    father_name = db.Column(db.String(100))
    marital_status = db.Column(db.String(20))
    has_children = db.Column(db.Boolean, default=False)
    children_count = db.Column(db.Integer, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'full_name': self.full_name,
            'birth_date': self.birth_date.strftime('%d/%m/%Y') if self.birth_date else None,
            'gender': self.gender,
            'cpf': self.cpf,
            'rg': self.rg,
            'phone': self.phone,
            'email': self.email,
            'street': self.street,
            'number': self.number,
            'neighborhood': self.neighborhood,
            'city': self.city,
            'state': self.state,
            'cep': self.cep,
            'mother_name': self.mother_name,
            'father_name': self.father_name,
            'marital_status': self.marital_status,
            'has_children': self.has_children,
            'children_count': self.children_count
        }
