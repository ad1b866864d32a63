from functools import wraps
from flask import g, request

from ..services import get_services
from ..services.auth import bearer_credential

def admin_required(fn):
    """
    Verify the bearer token and require an administrator before the view runs.
    The resolved user is available as g.admin_user.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        credential = bearer_credential(request.headers.get("Authorization"))
        result = get_services().auth.authenticate_admin(credential)
        if not result.ok:
            raise result.error
        g.admin_user = result.user
        return fn(*args, **kwargs)
    return wrapper
