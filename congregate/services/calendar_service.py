from datetime import datetime

import pytz
from flask import current_app
from icalendar import Calendar, Event
from sqlalchemy.orm import joinedload
from congregate.models import Booking
from congregate.services.booking_service import BookingService
from congregate.services.recurrence import BookingTemplate, expand

ROOM_COLORS = [
    "#f8717130", "#facc1530", "#4ade8030", "#60a5fa30", "#c084fc30", "#fb923c30",
    "#a3e63530", "#38bdf830", "#f472b630", "#34d39930", "#fcd34d30", "#818cf830"
]


def color_for_room(room_name):
    """Stable translucent colour picked from the room name."""
    if not room_name:
        return ROOM_COLORS[0]
    return ROOM_COLORS[sum(ord(c) for c in room_name) % len(ROOM_COLORS)]


def parse_room_filter(raw):
    """``"1,2"`` (or a list of ids) -> set of room id strings. Empty means all rooms."""
    if not raw:
        return set()
    if isinstance(raw, str):
        raw = raw.split(',')
    return {str(r).strip() for r in raw if str(r).strip()}


class CalendarService:

    @staticmethod
    def get_templates():
        """Every stored booking as a template, in the shape the list endpoint returns."""
        bookings = Booking.query.options(
            joinedload(Booking.room), joinedload(Booking.user)
        ).order_by(Booking.id).all()
        return [BookingTemplate.from_mapping(BookingService.format_booking(b)) for b in bookings]

    @staticmethod
    def get_occurrences(room_filter=None, now=None):
        """
        Fetch the templates and expand them over the configured window.
        Database errors propagate; the expansion itself never raises.
        """
        templates = CalendarService.get_templates()
        return templates, expand(
            templates,
            now=now,
            room_filter=room_filter,
            months=current_app.config['EXPANSION_MONTHS'],
            tz=current_app.config['TIMEZONE']
        )

    @staticmethod
    def to_events(templates, occurrences):
        """Adapt occurrences to the calendar widget's event objects."""
        by_id = {t.id: t for t in templates}
        events = []
        for occurrence in occurrences:
            template = by_id.get(occurrence.template_id)
            color = color_for_room(template.room_name if template else None)
            title = occurrence.description or "Evento"
            if occurrence.recurring:
                title = f"{title} (repetido)"
            events.append({
                'id': occurrence.occurrence_key,
                'title': title,
                'start': occurrence.start.isoformat(),
                'end': occurrence.end.isoformat(),
                'backgroundColor': color,
                'borderColor': color,
                'textColor': '#000000',
                'extendedProps': {'booking': template.source if template else None}
            })
        return events

    @staticmethod
    def to_ical(templates, occurrences, name='Congregate'):
        by_id = {t.id: t for t in templates}
        cal = Calendar()
        cal.add('prodid', '-//Congregate//Room bookings//PT')
        cal.add('version', '2.0')
        cal.add('x-wr-calname', name)

        stamp = datetime.now(pytz.utc)
        for occurrence in occurrences:
            template = by_id.get(occurrence.template_id)
            event = Event()
            event.add('uid', f"{occurrence.occurrence_key}@congregate")
            event.add('summary', occurrence.description or "Evento")
            event.add('dtstart', occurrence.start)
            event.add('dtend', occurrence.end)
            event.add('dtstamp', stamp)
            if template and template.room_name:
                event.add('location', template.room_name)
            cal.add_component(event)
        return cal.to_ical()
