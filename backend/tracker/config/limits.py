# Fixed row caps; list endpoints do not paginate.
LIST_ROW_CAP = 100
AUDIT_VIEW_LIMIT = 200


def normalize_limit(limit_raw, maximum: int):
    """Coerce an optional ?limit= value into 1..maximum (default maximum)."""
    try:
        limit = int(limit_raw) if limit_raw is not None else maximum
    except ValueError:
        raise ValueError('limit must be int')
    return max(1, min(limit, maximum))
