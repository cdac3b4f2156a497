from collections import namedtuple
from functools import wraps
from flask import g
from flask_jwt_extended import get_jwt, get_jwt_identity
from marketplace.utils.errors import ApiError

# Authenticated identity attached to the request
Principal = namedtuple('Principal', ['user_id', 'email'])


def principal_required(fn):
    """Decorator to attach the decoded token principal to ``g.principal``.

    Must be stacked under ``@jwt_required()``.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        identity = get_jwt_identity()

        if not identity:
            raise ApiError.unauthorized()

        try:
            user_id = int(identity)
        except (TypeError, ValueError):
            raise ApiError.unauthorized('Token is not valid')

        g.principal = Principal(user_id=user_id, email=get_jwt().get('email'))
        return fn(*args, **kwargs)
    return wrapper


def current_principal():
    principal = g.get('principal')
    if principal is None:
        raise ApiError.unauthorized()
    return principal
