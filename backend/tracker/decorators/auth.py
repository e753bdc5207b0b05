from functools import wraps
from flask import abort
from flask_jwt_extended import verify_jwt_in_request
from tracker.services.policy import current_actor


def require_role(*roles: str):
    """Reject the request with 403 unless the token's role is one of `roles`."""
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if current_actor().role not in roles:
                abort(403, description='Insufficient role')
            return fn(*args, **kwargs)
        return wrapper
    return outer
