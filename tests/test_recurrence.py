from datetime import date, datetime, timedelta

import pytest
from congregate.services.recurrence import (
    BookingTemplate, expand, expansion_window, normalize_day_name, resolve_month_day, resolve_weekday
)

# Wednesday; the 6-month window runs 2025-01-01 .. 2025-06-30
NOW = datetime(2025, 1, 1, 10, 0)


def template(**overrides):
    data = {
        'id': 7,
        'description': 'Culto de oração',
        'room_id': 1,
        'start_time': '19:00',
        'end_time': '21:00',
    }
    data.update(overrides)
    return data


def count_weekdays(start, end, weekday):
    """Reference count of a Sunday=0 weekday in [start, end)."""
    total, day = 0, start
    while day < end:
        if day.isoweekday() % 7 == weekday:
            total += 1
        day += timedelta(days=1)
    return total


# --- ONE-TIME BOOKINGS ---

@pytest.mark.parametrize('raw', ['15/03/2025', '2025-03-15'])
def test_one_time_booking_accepts_both_date_formats(raw):
    occurrences = expand([template(date=raw)], now=NOW)

    assert len(occurrences) == 1
    occurrence = occurrences[0]
    assert occurrence.start == datetime(2025, 3, 15, 19, 0, 0)
    assert occurrence.end == datetime(2025, 3, 15, 21, 0, 0)
    assert occurrence.occurrence_key == '7'
    assert occurrence.recurring is False


def test_one_time_booking_outside_window_is_still_emitted():
    occurrences = expand([template(date='2030-12-25', repeat='none')], now=NOW)
    assert [o.start.date() for o in occurrences] == [date(2030, 12, 25)]


def test_times_are_padded_with_seconds():
    occurrences = expand([template(date='2025-02-10', start_time='9:05', end_time='10:30:15')], now=NOW)
    assert occurrences[0].start == datetime(2025, 2, 10, 9, 5, 0)
    assert occurrences[0].end == datetime(2025, 2, 10, 10, 30, 15)


def test_day_first_format_wins_when_ambiguous():
    # 01/02/2025 is 1 February, not 2 January
    occurrences = expand([template(date='01/02/2025')], now=NOW)
    assert occurrences[0].start.date() == date(2025, 2, 1)


@pytest.mark.parametrize('raw', ['31/02/2025', '2025/03/15', 'amanhã', '15-03-2025'])
def test_unparseable_date_contributes_nothing(raw):
    assert expand([template(date=raw)], now=NOW) == []


# --- WEEKLY REPEAT ---

def test_weekly_repeat_emits_one_occurrence_per_matching_day():
    occurrences = expand([template(repeat='week', repeat_day='quarta-feira')], now=NOW)

    start, end = expansion_window(NOW)
    assert len(occurrences) == count_weekdays(start, end, 3) == 26
    assert all(o.start.isoweekday() == 3 for o in occurrences)
    assert occurrences[0].occurrence_key == '7-2025-01-01'
    assert occurrences[-1].start.date() == date(2025, 6, 25)
    assert all(o.recurring for o in occurrences)


def test_portuguese_and_english_day_names_are_equivalent():
    variants = ['quarta-feira', 'Quarta-Feira', 'wed', 'WED', 'quarta', 'Qua', 'wednesday', 3, '3']
    results = [expand([template(repeat='week', repeat_day=v)], now=NOW) for v in variants]
    assert all(r == results[0] for r in results)
    assert len(results[0]) == 26


@pytest.mark.parametrize('name,expected', [
    ('domingo', 0), ('Dom', 0), ('sun', 0),
    ('segunda-feira', 1), ('seg', 1), ('Mon', 1),
    ('Terça-feira', 2), ('terca', 2), ('ter', 2), ('tue', 2),
    ('quinta-feira', 4), ('thu', 4),
    ('Sexta', 5), ('fri', 5),
    ('sábado', 6), ('Sáb', 6), ('sab', 6), ('SAT', 6), ('Sáb.', 6),
    ('  Quarta-feira  ', 3),
])
def test_resolve_weekday_names(name, expected):
    assert resolve_weekday(name) == expected


@pytest.mark.parametrize('value', ['funday', '', None, 7, -1, True, 'feira'])
def test_resolve_weekday_rejects_unknown_values(value):
    assert resolve_weekday(value) is None


def test_normalize_day_name_strips_accents_and_suffix():
    assert normalize_day_name('Terça-Feira') == 'terca'
    assert normalize_day_name('SÁBADO') == 'sabado'


def test_unknown_repeat_day_skips_only_that_template():
    templates = [
        template(id=1, repeat='week', repeat_day='funday'),
        template(id=2, date='2025-01-05'),
    ]
    occurrences = expand(templates, now=NOW)
    assert [o.template_id for o in occurrences] == [2]


def test_sunday_as_zero_is_not_treated_as_missing():
    occurrences = expand([template(repeat='week', repeat_day=0)], now=NOW)
    assert occurrences and all(o.start.isoweekday() == 7 for o in occurrences)


# --- DAILY AND MONTHLY REPEAT ---

def test_daily_repeat_matches_every_day_of_the_window():
    occurrences = expand([template(repeat='day')], now=NOW)
    start, end = expansion_window(NOW)
    assert len(occurrences) == (end - start).days == 181


def test_monthly_repeat_matches_day_of_month():
    occurrences = expand([template(repeat='month', repeat_day=15)], now=NOW)
    assert [o.start.date() for o in occurrences] == [date(2025, m, 15) for m in range(1, 7)]


def test_monthly_repeat_skips_months_without_that_day():
    occurrences = expand([template(repeat='month', repeat_day='31')], now=NOW)
    assert [o.start.date() for o in occurrences] == [date(2025, 1, 31), date(2025, 3, 31), date(2025, 5, 31)]


@pytest.mark.parametrize('value', [0, 32, 'quinze', None])
def test_monthly_repeat_with_invalid_day_is_skipped(value):
    assert expand([template(repeat='month', repeat_day=value)], now=NOW) == []


# --- MALFORMED TEMPLATES ---

@pytest.mark.parametrize('missing', ['room_id', 'start_time', 'end_time'])
def test_template_missing_required_field_produces_nothing(missing):
    data = template(date='2025-01-10')
    del data[missing]
    assert expand([data], now=NOW) == []


def test_invalid_times_are_skipped():
    assert expand([template(date='2025-01-10', start_time='25:00')], now=NOW) == []
    assert expand([template(date='2025-01-10', start_time='21:00', end_time='19:00')], now=NOW) == []


def test_malformed_entries_do_not_abort_the_batch():
    batch = [
        None, 'booking', template(id=1, room_id=None),
        template(id=3, repeat=1), template(id=4, repeat='week', repeat_day='²'),
        template(id=5, repeat='month', repeat_day='³'),
        template(id=2, date='2025-01-10'),
    ]
    occurrences = expand(batch, now=NOW)
    assert [o.template_id for o in occurrences] == [2]


@pytest.mark.parametrize('value', ['²', '³', '½'])
def test_digit_like_characters_are_not_day_numbers(value):
    assert resolve_weekday(value) is None
    assert resolve_month_day(value) is None


# --- FILTERS, WINDOW, IDEMPOTENCE ---

def test_room_filter_keeps_only_allowed_rooms():
    templates = [template(id=1, room_id=1, date='2025-01-10'), template(id=2, room_id=2, date='2025-01-10')]

    assert [o.template_id for o in expand(templates, now=NOW, room_filter={2})] == [2]
    assert [o.template_id for o in expand(templates, now=NOW, room_filter={'1'})] == [1]
    assert len(expand(templates, now=NOW, room_filter=set())) == 2


def test_nested_room_object_as_returned_by_the_api():
    data = {
        'id': 3, 'description': 'Ensaio', 'room': {'id': 5, 'name': 'Templo', 'size': 300},
        'date': None, 'start_time': '18:00', 'end_time': '20:00', 'repeat': 'week', 'repeat_day': 'Sáb',
    }
    occurrences = expand([data], now=NOW)
    assert occurrences and all(o.room_id == 5 for o in occurrences)
    assert all(o.start.isoweekday() == 6 for o in occurrences)
    assert BookingTemplate.from_mapping(data).room_name == 'Templo'


def test_window_end_follows_calendar_months():
    assert expansion_window(datetime(2025, 8, 31, 9, 0)) == (date(2025, 8, 31), date(2026, 2, 28))


def test_expansion_is_idempotent_for_a_frozen_now():
    templates = [
        template(id=1, date='2025-02-01'),
        template(id=2, repeat='week', repeat_day='sex'),
        template(id=3, repeat='month', repeat_day=10),
    ]
    first = expand(templates, now=NOW)
    second = expand(templates, now=NOW)
    assert first == second
    assert [o.to_dict() for o in first] == [o.to_dict() for o in second]


def test_timezone_makes_instants_aware():
    occurrences = expand([template(date='2025-03-15')], now=NOW, tz='America/Sao_Paulo')
    assert occurrences[0].start.utcoffset() == timedelta(hours=-3)
    assert occurrences[0].start.hour == 19
