from sqlalchemy.exc import IntegrityError
from congregate.extensions import db
from congregate.utils.errors import NotFoundError, translate_db_error


def commit_or_raise():
    """Commit the session; integrity failures roll back and surface as ValueError."""
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise ValueError(translate_db_error(e)) from e


def get_or_404(model, record_id, message):
    record = db.session.get(model, record_id)
    if record is None:
        raise NotFoundError(message)
    return record
