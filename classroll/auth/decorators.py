"""Decorators for the auth blueprint."""

from functools import wraps

from flask import g

from classroll.errors import AccessDenied, NotAuthenticated

from .context import ANONYMOUS


def current_auth():
    """Return the auth context resolved for this request."""
    return getattr(g, "auth", ANONYMOUS)


def role_required(*roles):
    """Reject the request unless the user holds one of ``roles``.

    Usage:
    @role_required()
    def any_signed_in_user():
        ...

    @role_required("admin", "teacher")
    def staff_view():
        ...
    """

    def decorator(func):
        @wraps(func)
        def decorated_function(*args, **kwargs):
            auth = current_auth()
            if not auth.is_authenticated:
                raise NotAuthenticated()
            if roles and not auth.has_role(*roles):
                raise AccessDenied()
            return func(*args, **kwargs)

        return decorated_function

    return decorator
