import math


def get_pagination(page=1, page_size=10, total=0):
    """Compute limit/offset and navigation flags for a page of ``total`` rows.

    ``page`` and ``page_size`` are clamped to at least 1 and there is always
    at least one page, even when ``total`` is 0.
    """
    limit = max(int(page_size), 1)
    current_page = max(int(page), 1)
    offset = (current_page - 1) * limit
    total_pages = max(math.ceil(total / limit), 1)

    return {
        'limit': limit,
        'offset': offset,
        'page': current_page,
        'totalPages': total_pages,
        'hasNext': current_page < total_pages,
        'hasPrev': current_page > 1,
    }


def paginate(query, page=1, page_size=10):
    """Run ``query`` for one page. Returns (items, pagination dict with total)."""
    total = query.order_by(None).count()
    pagination = get_pagination(page, page_size, total)
    items = query.limit(pagination['limit']).offset(pagination['offset']).all()
    pagination['total'] = total
    return items, pagination


def page_args(args, default_size=10, max_size=100, size_key='limit'):
    """Read ``page`` and page size from request args, falling back to defaults."""
    page = args.get('page', 1, type=int) or 1
    size = args.get(size_key, default_size, type=int) or default_size
    if page < 1:
        raise ValueError("Page must be greater than 0.")
    if size < 1 or size > max_size:
        raise ValueError(f"Page size must be between 1 and {max_size}.")
    return page, size
