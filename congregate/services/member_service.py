import re
from collections import Counter
from datetime import date

from congregate.extensions import db
from congregate.models import Member
from congregate.utils.db import commit_or_raise, get_or_404
from congregate.utils.pagination import paginate
from congregate.utils.validators import (
    check_choice, check_email, check_length, check_phone, parse_br_date, require_fields
)

GENDERS = ('Masculino', 'Feminino', 'Outro')
MARITAL_STATUSES = ('Solteiro', 'Casado', 'Viúvo', 'Divorciado')

MEMBER_FIELDS = (
    'full_name', 'birth_date', 'gender', 'cpf', 'rg', 'phone', 'email', 'street', 'number',
    'neighborhood', 'city', 'state', 'cep', 'mother_name', 'father_name', 'marital_status',
    'has_children', 'children_count'
)

ALLOWED_SEARCH_FIELDS = (
    'full_name', 'gender', 'phone', 'email', 'city', 'state', 'marital_status', 'has_children'
)

CHART_COLORS = [
    "#FF6384", "#36A2EB", "#FFCE56", "#4BC0C0", "#9966FF",
    "#FF9F40", "#FFB6C1", "#8A2BE2", "#7FFF00", "#FFD700"
]

AGE_RANGES = (
    ('18-25', 18, 25),
    ('26-35', 26, 35),
    ('36-45', 36, 45),
    ('46-55', 46, 55),
    ('56+', 56, None),
)

# Max lengths for free-text fields
TEXT_LIMITS = {
    'street': 150, 'number': 20, 'neighborhood': 100, 'city': 100,
    'state': 50, 'mother_name': 100, 'father_name': 100
}


def _operator_clause(column, operator, value):
    return {
        'eq': lambda: column == value,
        'neq': lambda: column != value,
        'gt': lambda: column > value,
        'gte': lambda: column >= value,
        'lt': lambda: column < value,
        'lte': lambda: column <= value,
        'like': lambda: column.like(value),
        'ilike': lambda: column.ilike(value),
    }[operator]()


def calculate_age(birth_date, today=None):
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def _chart(counts, total, labeler=str):
    return [
        {
            'label': labeler(key),
            'value': value,
            'percentage': f"{(value / total) * 100:.2f}" if total else "0.00",
            'fill': CHART_COLORS[index % len(CHART_COLORS)]
        }
        for index, (key, value) in enumerate(counts.items())
    ]


class MemberService:

    @staticmethod
    def clean_member_data(data, partial=False):
        """Validate a member payload and convert it to column values."""
        if not data:
            raise ValueError("At least one field must be provided.")
        required = ('full_name', 'birth_date', 'gender', 'phone', 'email')
        # Required fields may be left out of a partial update, never blanked
        require_fields(data, required if not partial else [f for f in required if f in data])

        values = {k: v for k, v in data.items() if k in MEMBER_FIELDS}
        if 'full_name' in values:
            check_length(values, 'full_name', 100, min_len=2, label='Full name')
            values['full_name'] = values['full_name'].strip()
        if 'birth_date' in values:
            values['birth_date'] = parse_br_date(values['birth_date'], label='Birth date', allow_future=False)
        check_choice(values, 'gender', GENDERS, label='Gender')
        check_choice(values, 'marital_status', MARITAL_STATUSES, label='Marital status')
        if 'phone' in values:
            check_phone(values['phone'])
            values['phone'] = re.sub(r'\s', '', values['phone'])
        if 'email' in values:
            check_email(values['email'])
        if values.get('cpf'):
            values['cpf'] = re.sub(r'\D', '', values['cpf'])
            if len(values['cpf']) != 11:
                raise ValueError("CPF must have 11 digits.")
        if values.get('cep') and not re.match(r'^\d{8}$', values['cep']):
            raise ValueError("CEP must have 8 digits.")
        for field, limit in TEXT_LIMITS.items():
            check_length(values, field, limit)
        if 'children_count' in values:
            count = values['children_count']
            if isinstance(count, bool) or not isinstance(count, int) or not 0 <= count <= 20:
                raise ValueError("Children count must be between 0 and 20.")
        if 'has_children' in values and not isinstance(values['has_children'], bool):
            raise ValueError("has_children must be true or false.")
        return values

    @staticmethod
    def create_member(data):
        values = MemberService.clean_member_data(data)
        member = Member(**values)
        db.session.add(member)
        commit_or_raise()
        return member

    @staticmethod
    def list_members(page=1, page_size=10):
        return paginate(Member.query.order_by(Member.full_name), page, page_size)

    @staticmethod
    def get_member(member_id):
        return get_or_404(Member, member_id, "Member not found.")

    @staticmethod
    def update_member(member_id, data):
        member = get_or_404(Member, member_id, "Member not found.")
        values = MemberService.clean_member_data(data, partial=True)
        for key, value in values.items():
            setattr(member, key, value)
        commit_or_raise()
        return member

    @staticmethod
    def delete_member(member_id):
        member = get_or_404(Member, member_id, "Member not found.")
        db.session.delete(member)
        commit_or_raise()

    @staticmethod
    def search_members(full_name):
        if not full_name or not full_name.strip():
            raise ValueError("Name is required for search.")
        return Member.query.filter(Member.full_name.ilike(f"%{full_name.strip()}%")).order_by(Member.full_name).all()

    @staticmethod
    def filter_members(field, value, operator):
        if not field or value is None or not operator:
            raise ValueError("Invalid parameters.")
        if field not in ALLOWED_SEARCH_FIELDS:
            raise ValueError("Field not allowed for search.")
        try:
            clause = _operator_clause(getattr(Member, field), operator, value)
        except KeyError:
            raise ValueError("Invalid operator. Use: eq, neq, gt, gte, lt, lte, like, ilike.")
        return Member.query.filter(clause).order_by(Member.full_name).all()

    @staticmethod
    def get_analytics(today=None):
        """Demographic breakdowns of the membership, shaped for charts."""
        members = Member.query.all()
        total = len(members)

        marital = Counter(m.marital_status or 'Não informado' for m in members)
        gender = Counter(m.gender for m in members)
        children = Counter(m.children_count or 0 for m in members)

        ages = Counter({label: 0 for label, _, _ in AGE_RANGES})
        for member in members:
            age = calculate_age(member.birth_date, today)
            for label, low, high in AGE_RANGES:
                if age >= low and (high is None or age <= high):
                    ages[label] += 1
                    break

        cities = Counter(m.city for m in members if m.city)
        states = Counter(m.state for m in members if m.state)

        return {
            'marital': _chart(marital, total),
            'gender': _chart(gender, total),
            'children': _chart(children, total, lambda count: f"{count} filhos"),
            'age': _chart(ages, total),
            'city': _chart(cities, total),
            'state': _chart(states, total)
        }
