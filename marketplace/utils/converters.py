from werkzeug.routing import IntegerConverter

from marketplace.utils.validators import MAX_DB_INTEGER


class RecordIdConverter(IntegerConverter):
    """Integer URL segment limited to values a primary key column can hold.

    Larger ids don't match the route, so they answer 404.
    """

    def __init__(self, map, *args, **kwargs):
        kwargs.setdefault('max', MAX_DB_INTEGER)
        super().__init__(map, *args, **kwargs)
