# payroll_api/common/auth.py
from functools import wraps

from flask import current_app
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from payroll_api.common.http import fail
from payroll_api.extensions import db
from payroll_api.models.user import User, MANAGEMENT_ROLES


def token_required(f):
    """Resolve the bearer token to an active User and pass it as first arg."""
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            verify_jwt_in_request()
            uid = get_jwt_identity()
            user_id = int(uid) if uid else None
        except (JWTExtendedException, PyJWTError, ValueError, TypeError) as e:
            current_app.logger.info("rejected token: %s", e)
            return fail("Token is invalid or expired", status=401, code="UNAUTHORIZED")
        if not user_id:
            return fail("Invalid token", status=401, code="UNAUTHORIZED")
        current_user = db.session.get(User, user_id)
        if not current_user:
            return fail("User not found or removed", status=401, code="UNAUTHORIZED")
        if not current_user.is_active:
            return fail("User is not active", status=403, code="FORBIDDEN")
        return f(current_user, *args, **kwargs)
    return decorated


def role_required(*roles):
    def decorator(f):
        @wraps(f)
        def decorated(current_user, *args, **kwargs):
            if current_user.role in roles:
                return f(current_user, *args, **kwargs)
            return fail("Forbidden: insufficient role", status=403, code="FORBIDDEN")
        return decorated
    return decorator


def management_required(f):
    return role_required(*MANAGEMENT_ROLES)(f)
