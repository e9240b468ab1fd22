import re
from datetime import date, datetime, time

# Tried in order, first match wins
DATE_FORMATS = ('%d/%m/%Y', '%Y-%m-%d')

WEEKDAY_ABBR = ['Dom', 'Seg', 'Ter', 'Qua', 'Qui', 'Sex', 'Sáb']
MONTH_ABBR = ['jan', 'fev', 'mar', 'abr', 'mai', 'jun', 'jul', 'ago', 'set', 'out', 'nov', 'dez']

# H:M, HH:MM or HH:MM:SS within 00:00:00-23:59:59
TIME_RE = re.compile(r'^([0-9]|[0-1][0-9]|2[0-3]):([0-9]|[0-5][0-9])(?::([0-5][0-9]))?$')


def parse_date(value):
    """Parse ``DD/MM/YYYY`` or ``YYYY-MM-DD`` (in that order). Returns None if neither fits."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    value = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def normalize_time(value):
    """Return the time as ``HH:MM:SS`` or None when it is not a valid clock time."""
    if isinstance(value, time):
        return value.strftime('%H:%M:%S')
    if not value or not isinstance(value, str):
        return None
    match = TIME_RE.match(value.strip())
    if not match:
        return None
    hours, minutes, seconds = match.group(1), match.group(2), match.group(3) or '0'
    return f"{int(hours):02d}:{int(minutes):02d}:{int(seconds):02d}"


def parse_time(value):
    normalized = normalize_time(value)
    if normalized is None:
        return None
    return datetime.strptime(normalized, '%H:%M:%S').time()


def weekday_index(day):
    """Weekday with Sunday as 0 and Saturday as 6."""
    return day.isoweekday() % 7


def format_date(day):
    return day.strftime('%d/%m/%Y') if day else None


def format_time(value):
    return value.strftime('%H:%M') if value else None
