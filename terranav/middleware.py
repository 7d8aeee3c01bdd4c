from dataclasses import dataclass
from flask import request, jsonify, g
from flask_login import current_user
from functools import wraps
from typing import Optional
import logging
import re

from terranav.errors import AuthorizationError, NotFoundError
from terranav.extensions import db

logger = logging.getLogger(__name__)

# Exact paths that never require login
LOGIN_WHITELIST = [
    '/api/health',
    '/api/auth/callback',
]

# Read-only API paths that anonymous visitors may browse
PUBLIC_BROWSE_PREFIXES = (
    '/api/categories',
    '/api/listings',
    '/api/comments',
    '/api/reviews',
    '/api/forum/posts',
)

USER_RATING_RE = re.compile(r'^/api/users/[^/]+/rating$')


@dataclass(frozen=True)
class Principal:
    """The verified caller of the current request."""

    user_id: str
    email: Optional[str] = None
    is_admin: bool = False

    @classmethod
    def from_user(cls, user):
        return cls(
            user_id=user.id,
            email=user.email,
            is_admin=bool(user.is_admin),
        )

    def can_modify(self, owner_id) -> bool:
        return self.is_admin or owner_id == self.user_id


def current_principal() -> Optional[Principal]:
    return g.get('principal')


def is_public_browse_path(path: str) -> bool:
    if path.startswith(PUBLIC_BROWSE_PREFIXES):
        return True
    if USER_RATING_RE.match(path):
        return True
    return False


def is_upload_file(path):
    return path.startswith('/uploads/')


def setup_auth_middleware(app):

    @app.before_request
    def require_login():
        path = request.path
        method = request.method.upper()

        g.principal = None
        if current_user.is_authenticated:
            g.principal = Principal.from_user(current_user)

        # Uploaded images are served without access control
        if is_upload_file(path):
            return None

        # Allow whitelist paths
        if path in LOGIN_WHITELIST:
            return None

        # Allow anonymous browsing for safe methods
        if method in (
            'GET',
            'HEAD',
                'OPTIONS') and is_public_browse_path(path):
            return None

        if not path.startswith('/api/'):
            return None

        if g.principal is None:
            return jsonify({'message': 'Unauthorized'}), 401

        return None


def admin_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        principal = current_principal()
        if principal is None or not principal.is_admin:
            logger.warning(
                "User %s attempted admin-only %s %s",
                principal.user_id if principal else None,
                request.method,
                request.path,
            )
            raise AuthorizationError('Admin access required')
        return f(*args, **kwargs)
    return decorated_function


def object_permission_required(
        model_class,
        id_param='id',
        owner_field='user_id',
        label=None):
    """Load ``model_class`` by the route id and require owner-or-admin.

    The loaded row is passed to the view as ``resource``.
    """
    label = label or model_class.__name__

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            resource_id = kwargs.get(id_param)
            resource = db.session.get(model_class, resource_id)
            if resource is None:
                raise NotFoundError(f'{label} not found')

            principal = current_principal()
            owner_id = getattr(resource, owner_field, None)
            if principal is None or not principal.can_modify(owner_id):
                logger.warning(
                    "User %s attempted to modify %s %s",
                    principal.user_id if principal else None,
                    label,
                    resource_id,
                )
                raise AuthorizationError(
                    f'Not authorized to modify this {label.lower()}')

            kwargs['resource'] = resource
            return f(*args, **kwargs)
        return decorated_function
    return decorator
