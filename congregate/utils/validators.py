import re
from datetime import date

from congregate.utils.dates import parse_date

PHONE_RE = re.compile(r'^\(?\d{2}\)?[\s-]?\d{4,5}[\s-]?\d{4}$')
EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def require_fields(data, fields):
    missing = [f for f in fields if data.get(f) in (None, '') or (isinstance(data.get(f), str) and not data[f].strip())]
    if missing:
        raise ValueError(f"Missing required fields: {', '.join(missing)}.")


def check_length(data, field, max_len, min_len=None, label=None):
    value = data.get(field)
    if value is None:
        return
    label = label or field
    if not isinstance(value, str):
        raise ValueError(f"{label} must be a string.")
    if min_len is not None and len(value.strip()) < min_len:
        raise ValueError(f"{label} must have at least {min_len} characters.")
    if len(value) > max_len:
        raise ValueError(f"{label} must have at most {max_len} characters.")


def check_choice(data, field, choices, label=None):
    value = data.get(field)
    if value is not None and value not in choices:
        raise ValueError(f"{label or field} must be one of: {', '.join(str(c) for c in choices)}.")


def check_email(email):
    if not email or not EMAIL_RE.match(email):
        raise ValueError("Invalid email format.")


def check_phone(phone):
    if not phone or not PHONE_RE.match(phone):
        raise ValueError("Invalid phone format.")


def parse_br_date(value, label='date', allow_past=True, allow_future=True):
    """Strict ``DD/MM/YYYY`` parsing used by member and scale forms."""
    if not isinstance(value, str) or not re.match(r'^\d{2}/\d{2}/\d{4}$', value.strip()):
        raise ValueError(f"{label} must be in DD/MM/YYYY format.")
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"{label} is not a valid date.")
    today = date.today()
    if not allow_future and parsed > today:
        raise ValueError(f"{label} cannot be in the future.")
    if not allow_past and parsed < today:
        raise ValueError(f"{label} cannot be in the past.")
    return parsed
