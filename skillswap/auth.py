from functools import wraps

from flask import current_app, g, request

from skillswap import db
from skillswap.errors import Unauthenticated
from skillswap.identity import IdentityService


def login_required(f):
    """
    Decorator to protect endpoints with authentication.

    A missing bearer token is a 401; a token that does not verify, has
    expired or points at a removed user is a 403.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        scheme, _, token = request.headers.get('Authorization', '').partition(' ')
        token = token.strip()
        if scheme != 'Bearer' or not token:
            raise Unauthenticated('Access token required')

        # Attach the user for downstream use
        g.user = IdentityService(db.session, current_app.config).resolve(token)
        return f(*args, **kwargs)
    return decorated_function


def current_user_id():
    return g.user['id']
