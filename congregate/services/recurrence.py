"""Expand stored booking templates into concrete calendar occurrences.

A template is either a one-time booking (it has a ``date``) or a recurring
one (``repeat`` is ``day``, ``week`` or ``month``). Recurring templates are
materialized day by day over a bounded window starting today, so nothing
here is ever persisted: callers recompute occurrences on every read.

The expander is best-effort. A template with missing fields, a date that
cannot be parsed or a repeat day that cannot be resolved simply contributes
no occurrences, and the rest of the batch is expanded normally.
"""
import logging
import unicodedata
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Any, Iterable, List, Optional

import pytz
from dateutil.relativedelta import relativedelta

from congregate.utils.dates import normalize_time, parse_date, weekday_index

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_MONTHS = 6

# Keys are lowercased, accent-stripped and without the "-feira" suffix
WEEKDAY_NAMES = {
    # Portuguese
    'domingo': 0, 'segunda': 1, 'terca': 2, 'quarta': 3,
    'quinta': 4, 'sexta': 5, 'sabado': 6,
    'dom': 0, 'seg': 1, 'ter': 2, 'qua': 3, 'qui': 4, 'sex': 5, 'sab': 6,
    # English
    'sunday': 0, 'monday': 1, 'tuesday': 2, 'wednesday': 3,
    'thursday': 4, 'friday': 5, 'saturday': 6,
    'sun': 0, 'mon': 1, 'tue': 2, 'wed': 3, 'thu': 4, 'fri': 5, 'sat': 6,
}


def normalize_day_name(name: str) -> str:
    cleaned = unicodedata.normalize('NFKD', name.strip().lower())
    cleaned = ''.join(c for c in cleaned if not unicodedata.combining(c))
    cleaned = cleaned.rstrip('.')
    if cleaned.endswith('-feira'):
        cleaned = cleaned[:-len('-feira')]
    return cleaned.strip()


def resolve_weekday(value: Any) -> Optional[int]:
    """Map a weekday number (0=Sunday) or a pt/en day name to 0..6, else None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value if 0 <= value <= 6 else None
    if not isinstance(value, str) or not value.strip():
        return None
    if value.strip().isdecimal():
        return resolve_weekday(int(value.strip()))
    return WEEKDAY_NAMES.get(normalize_day_name(value))


def resolve_month_day(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str) and value.strip().isdecimal():
        value = int(value.strip())
    if isinstance(value, int) and 1 <= value <= 31:
        return value
    return None


@dataclass
class BookingTemplate:
    id: Any
    room_id: Any
    start_time: Any
    end_time: Any
    description: Optional[str] = None
    date: Any = None
    repeat: Optional[str] = None
    repeat_day: Any = None
    user_id: Any = None
    room_name: Optional[str] = None
    # Payload handed back to the calendar as extendedProps.booking
    source: dict = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_mapping(cls, data: dict) -> 'BookingTemplate':
        """Build a template from a booking dict as the booking endpoints return it.

        Accepts snake_case and camelCase keys, and a room given either as
        ``room_id`` or as a nested ``room`` object.
        """
        room = data.get('room')
        room_id = data.get('room_id', data.get('roomId'))
        room_name = None
        if isinstance(room, dict):
            room_id = room.get('id', room_id)
            room_name = room.get('name')
        elif room_id is None:
            room_id = room

        repeat_day = None
        for key in ('repeat_day', 'repeatDay', 'day_repeat'):
            if data.get(key) is not None:
                repeat_day = data[key]
                break

        return cls(
            id=data.get('id'),
            description=data.get('description'),
            room_id=room_id,
            room_name=room_name,
            date=data.get('date'),
            start_time=data.get('start_time', data.get('startTime')),
            end_time=data.get('end_time', data.get('endTime')),
            repeat=data.get('repeat'),
            repeat_day=repeat_day,
            user_id=data.get('user_id', data.get('userId')),
            source=dict(data),
        )

    @property
    def repeat_kind(self) -> str:
        if not isinstance(self.repeat, str):
            return 'none'
        kind = self.repeat.strip().lower()
        return 'none' if kind in ('', 'null') else kind


@dataclass(frozen=True)
class Occurrence:
    template_id: Any
    occurrence_key: str
    start: datetime
    end: datetime
    room_id: Any
    description: Optional[str]
    recurring: bool = False

    def to_dict(self):
        return {
            'template_id': self.template_id,
            'occurrence_key': self.occurrence_key,
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'room_id': self.room_id,
            'description': self.description,
            'recurring': self.recurring,
        }


def expansion_window(now: datetime, months: int = DEFAULT_WINDOW_MONTHS):
    """First and one-past-last calendar day of ``[now, now + months)``."""
    return now.date(), (now + relativedelta(months=months)).date()


def _day_matcher(template: BookingTemplate):
    """Predicate over dates for recurring templates.

    Returns None for one-time templates and False when the repeat day cannot
    be resolved, which drops the template.
    """
    kind = template.repeat_kind
    if kind == 'day':
        return lambda day: True
    if kind == 'week':
        weekday = resolve_weekday(template.repeat_day)
        if weekday is None:
            return False
        return lambda day: weekday_index(day) == weekday
    if kind == 'month':
        # Months without that day (31 in April, 30 in February) are skipped
        month_day = resolve_month_day(template.repeat_day)
        if month_day is None:
            return False
        return lambda day: day.day == month_day
    return None


def _instant(day, clock: time, tz):
    naive = datetime.combine(day, clock)
    return tz.localize(naive) if tz is not None else naive


def expand_template(template: BookingTemplate, window_start, window_end, tz=None) -> List[Occurrence]:
    if not template.start_time or not template.end_time or template.room_id in (None, ''):
        logger.debug("Skipping booking %s: missing time or room", template.id)
        return []

    start_str = normalize_time(template.start_time)
    end_str = normalize_time(template.end_time)
    if start_str is None or end_str is None:
        logger.debug("Skipping booking %s: unparseable time", template.id)
        return []
    start_clock = time.fromisoformat(start_str)
    end_clock = time.fromisoformat(end_str)
    if end_clock <= start_clock:
        logger.debug("Skipping booking %s: ends before it starts", template.id)
        return []

    matcher = _day_matcher(template)
    if matcher is False:
        logger.debug("Skipping booking %s: unknown repeat day %r", template.id, template.repeat_day)
        return []

    occurrences = []
    if template.date:
        day = parse_date(template.date)
        if day is None:
            logger.debug("Skipping booking %s: unparseable date %r", template.id, template.date)
            return []
        occurrences.append(Occurrence(
            template_id=template.id,
            occurrence_key=str(template.id),
            start=_instant(day, start_clock, tz),
            end=_instant(day, end_clock, tz),
            room_id=template.room_id,
            description=template.description,
        ))

    if matcher:
        day = window_start
        while day < window_end:
            if matcher(day):
                occurrences.append(Occurrence(
                    template_id=template.id,
                    occurrence_key=f"{template.id}-{day.isoformat()}",
                    start=_instant(day, start_clock, tz),
                    end=_instant(day, end_clock, tz),
                    room_id=template.room_id,
                    description=template.description,
                    recurring=True,
                ))
            day += timedelta(days=1)

    return occurrences


def expand(templates: Iterable, now: Optional[datetime] = None, room_filter=None,
           months: int = DEFAULT_WINDOW_MONTHS, tz=None) -> List[Occurrence]:
    """Expand booking templates into occurrences inside ``[now, now + months)``.

    ``templates`` may be ``BookingTemplate`` instances or booking dicts.
    ``room_filter`` is a collection of allowed room ids; empty or None allows
    every room. ``tz`` (a pytz timezone or its name) makes the returned
    instants timezone-aware and decides which calendar day "now" falls on.
    Results are in template order, then day order.
    """
    if isinstance(tz, str):
        tz = pytz.timezone(tz)
    if now is None:
        now = datetime.now(tz) if tz is not None else datetime.now()
    elif tz is not None and now.tzinfo is not None:
        now = now.astimezone(tz)

    window_start, window_end = expansion_window(now, months)
    allowed = {str(room_id) for room_id in room_filter} if room_filter else None

    occurrences = []
    for item in templates:
        if isinstance(item, BookingTemplate):
            template = item
        elif isinstance(item, dict):
            template = BookingTemplate.from_mapping(item)
        else:
            logger.debug("Skipping %r: not a booking", item)
            continue
        if allowed is not None and str(template.room_id) not in allowed:
            continue
        occurrences.extend(expand_template(template, window_start, window_end, tz))
    return occurrences
