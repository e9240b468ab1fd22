from datetime import datetime

from flask import Flask, jsonify
from congregate.config import DevelopmentConfig
from congregate.extensions import db, migrate

def create_app(config_class=DevelopmentConfig):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Models must be imported so the metadata knows every table
    from congregate import models  # noqa: F401

    # Register Blueprints
    from congregate.api.routes.auth import auth_bp
    from congregate.api.routes.users import users_bp
    from congregate.api.routes.rooms import rooms_bp
    from congregate.api.routes.bookings import bookings_bp
    from congregate.api.routes.members import members_bp
    from congregate.api.routes.scales import scales_bp
    from congregate.api.routes.analytics import analytics_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(rooms_bp, url_prefix='/api/rooms')
    app.register_blueprint(bookings_bp, url_prefix='/api/bookings')
    app.register_blueprint(members_bp, url_prefix='/api/members')
    app.register_blueprint(scales_bp, url_prefix='/api/scales')
    app.register_blueprint(analytics_bp, url_prefix='/api/analytics')

    from congregate.utils.errors import register_error_handlers
    register_error_handlers(app)

    started_at = datetime.utcnow()

    @app.route('/health')
    def health():
        return jsonify({
            "status": "ok",
            "app": "Congregate",
            "timestamp": datetime.utcnow().isoformat(),
            "uptime": (datetime.utcnow() - started_at).total_seconds(),
        })

    return app
