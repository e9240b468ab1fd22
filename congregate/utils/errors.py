from flask import jsonify
from werkzeug.exceptions import HTTPException


class NotFoundError(ValueError):
    """Raised when a requested record does not exist."""


class ConflictError(ValueError):
    """Raised when a write would clash with existing data (e.g. a booked slot)."""


class PermissionDenied(ValueError):
    """Raised when the current user may not touch the record."""


# Postgres SQLSTATE codes we know how to explain
DB_ERROR_MESSAGES = {
    '23505': 'Duplicate record: a row with this unique value already exists.',
    '23503': 'Foreign key violation: the referenced record does not exist.',
    '23502': 'Not-null violation: a required field is missing.',
    '22P02': 'Invalid data type: malformed value.',
    '22008': 'The date sent is invalid.',
}

# Fallback for drivers without SQLSTATE (sqlite)
_DB_ERROR_MARKERS = (
    ('unique', '23505'),
    ('foreign key', '23503'),
    ('not null', '23502'),
    ('not-null', '23502'),
)


def translate_db_error(error):
    """Turn a DBAPI/SQLAlchemy error into a message fit for the client."""
    orig = getattr(error, 'orig', error)
    code = getattr(orig, 'pgcode', None)
    if code not in DB_ERROR_MESSAGES:
        text = str(orig).lower()
        code = next((c for marker, c in _DB_ERROR_MARKERS if marker in text), None)
    return DB_ERROR_MESSAGES.get(code, 'Unknown database error.')


def error_status(error):
    """HTTP status for a service-layer error."""
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, PermissionDenied):
        return 403
    if isinstance(error, ConflictError):
        return 409
    return 400


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'error': e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        app.logger.exception("Unhandled error: %s", e)
        return jsonify({'error': 'Internal Server Error'}), 500


def error_response(error):
    return jsonify({'error': str(error)}), error_status(error)
