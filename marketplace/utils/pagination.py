from flask import request

from marketplace.utils.validators import MAX_DB_INTEGER

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Keeps the row offset within a signed 64-bit integer
MAX_PAGE = MAX_DB_INTEGER // MAX_LIMIT


def get_page_args():
    """Read ``page`` and ``limit`` from the query string.

    Unparsable values fall back to the defaults, like ``request.args.get``
    with ``type=int`` does.
    """
    page = request.args.get('page', DEFAULT_PAGE, type=int)
    limit = request.args.get('limit', DEFAULT_LIMIT, type=int)
    page = min(max(page, 1), MAX_PAGE)
    limit = min(max(limit, 1), MAX_LIMIT)
    return page, limit


def paginate(query, serialize):
    """Paginate ``query`` and wrap the page in the list envelope"""
    page, limit = get_page_args()
    pagination = query.paginate(page=page, per_page=limit, error_out=False)

    return {
        'items': [serialize(item) for item in pagination.items],
        'page': page,
        'pages': pagination.pages,
        'total': pagination.total,
    }
