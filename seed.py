from congregate import create_app, db
from congregate.models import User, Room
from werkzeug.security import generate_password_hash

app = create_app()

with app.app_context():
    db.create_all()

    # Create Admin
    if not User.query.filter_by(email='admin@congregate.local').first():
        admin = User(
            name='Administrador',
            email='admin@congregate.local',
            phone='(11) 99999-0000',
            password_hash=generate_password_hash('password', method='pbkdf2:sha256'),
            role='admin'
        )
        db.session.add(admin)
        print("Admin created (admin@congregate.local/password)")

    # Create Rooms
    rooms_data = [
        {"name": "Templo", "size": 300, "description": "Nave principal"},
        {"name": "Sala Kids", "size": 30, "description": "Ministério infantil"},
        {"name": "Sala de Oração", "size": 12},
        {"name": "Estúdio", "size": 6, "description": "Transmissão e gravação", "exclusive": True}
    ]

    for r_data in rooms_data:
        if not Room.query.filter_by(name=r_data['name']).first():
            room = Room(**r_data)
            db.session.add(room)
            print(f"Room {room.name} created.")

    db.session.commit()
    print("Database seeded successfully.")
