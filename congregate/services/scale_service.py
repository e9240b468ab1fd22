from congregate.extensions import db
from congregate.models import Member, Scale
from congregate.models.scale import ROLE_FIELDS
from congregate.utils.db import commit_or_raise, get_or_404
from congregate.utils.errors import NotFoundError
from congregate.utils.pagination import paginate
from congregate.utils.validators import check_length, parse_br_date


def _member_id(value, label):
    if isinstance(value, dict):
        value = value.get('id')
    try:
        member_id = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{label} must be a member id.")
    if db.session.get(Member, member_id) is None:
        raise NotFoundError(f"{label} member not found.")
    return member_id


class ScaleService:

    @staticmethod
    def clean_scale_data(data, partial=False):
        if not data:
            raise ValueError("No data provided for update." if partial else "No input data provided.")

        values = {}
        if not partial or 'date' in data:
            values['date'] = parse_br_date(data.get('date'), label='Date', allow_past=False)
        if not partial or 'name' in data:
            check_length(data, 'name', 100, min_len=2, label='Name')
            if not data.get('name'):
                raise ValueError("Name must have at least 2 characters.")
            values['name'] = data['name'].strip()
        if not partial or 'direction' in data:
            values['direction_id'] = _member_id(data.get('direction'), 'Direction')
        if data.get('band') not in (None, ''):
            values['band_id'] = _member_id(data['band'], 'Band')
        elif 'band' in data:
            values['band_id'] = None
        if 'description' in data:
            check_length(data, 'description', 255, label='Description')
            values['description'] = data['description']
        for field in ROLE_FIELDS:
            if field in data:
                check_length(data, field, 100)
                values[field] = data[field]
        return values

    @staticmethod
    def _check_unique_name(name, exclude_id=None):
        query = Scale.query.filter(Scale.name == name)
        if exclude_id is not None:
            query = query.filter(Scale.id != exclude_id)
        if query.first():
            raise ValueError("A scale with this name already exists.")

    @staticmethod
    def create_scale(data):
        values = ScaleService.clean_scale_data(data)
        ScaleService._check_unique_name(values['name'])
        scale = Scale(**values)
        db.session.add(scale)
        commit_or_raise()
        return scale

    @staticmethod
    def list_scales(page=1, page_size=15):
        return paginate(Scale.query.order_by(Scale.date, Scale.id), page, page_size)

    @staticmethod
    def get_scale(scale_id):
        return get_or_404(Scale, scale_id, "Scale not found.")

    @staticmethod
    def update_scale(scale_id, data):
        scale = get_or_404(Scale, scale_id, "Scale not found.")
        values = ScaleService.clean_scale_data(data, partial=True)
        if 'name' in values:
            ScaleService._check_unique_name(values['name'], exclude_id=scale.id)
        for key, value in values.items():
            setattr(scale, key, value)
        commit_or_raise()
        return scale

    @staticmethod
    def delete_scale(scale_id):
        scale = get_or_404(Scale, scale_id, "Scale not found.")
        db.session.delete(scale)
        commit_or_raise()

    @staticmethod
    def search_scales(name):
        if not name or len(name.strip()) < 2:
            raise ValueError("Name must have at least 2 characters for search.")
        return Scale.query.filter(Scale.name.ilike(f"%{name.strip()}%")).order_by(Scale.date).all()

    @staticmethod
    def duplicate_scale(scale_id):
        original = get_or_404(Scale, scale_id, "Scale not found.")
        name = f"{original.name} (duplicado)"
        ScaleService._check_unique_name(name)

        copy = Scale(
            name=name,
            date=original.date,
            description=original.description,
            direction_id=original.direction_id,
            band_id=original.band_id,
            **{field: getattr(original, field) for field in ROLE_FIELDS}
        )
        db.session.add(copy)
        commit_or_raise()
        return copy
