from functools import wraps

from flask import session

from ..exceptions import AuthenticationError


def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if "admin_id" not in session:
            raise AuthenticationError()
        return fn(*args, **kwargs)

    return wrapper
