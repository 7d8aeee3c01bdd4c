from flask import Blueprint, jsonify
from flask_login import (
    login_user,
    logout_user,
    login_required,
    current_user,
)
from terranav.extensions import db
from terranav.errors import ValidationError
from terranav.models import User
from terranav.schemas import IdentityCallback, IdentityClaims, ProfileUpdate
from terranav.serializers import user_payload
from terranav.services.identity_service import verify_identity_token
from terranav.utils import parse_payload, request_payload
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('auth', __name__)


def upsert_user(claims):
    """Insert or refresh the local copy of an identity-provider user."""
    email = claims.email
    if email:
        clash = User.query.filter(
            User.email == email, User.id != claims.sub).first()
        if clash is not None:
            raise ValidationError.for_field(
                'email', 'Email already belongs to another account')

    user = db.session.get(User, claims.sub)
    if user is None:
        user = User(id=claims.sub)
        db.session.add(user)
        logger.info("New user registered: %s", claims.sub)

    user.email = email
    user.first_name = claims.first_name
    user.last_name = claims.last_name
    user.profile_image_url = claims.profile_image_url
    db.session.commit()
    return user


@bp.route('/api/auth/callback', methods=['POST'])
def callback():
    data = parse_payload(IdentityCallback, request_payload())
    raw_claims = verify_identity_token(data.token)
    if raw_claims is None:
        return jsonify({'message': 'Unauthorized'}), 401

    claims = parse_payload(IdentityClaims, raw_claims)
    user = upsert_user(claims)
    login_user(user)

    logger.info("User %s logged in", user.id)
    return jsonify(user_payload(user))


@bp.route('/api/auth/user', methods=['GET'])
@login_required
def get_user():
    return jsonify(user_payload(current_user))


@bp.route('/api/auth/profile', methods=['PUT'])
@login_required
def update_profile():
    data = parse_payload(ProfileUpdate, request_payload())
    changes = data.model_dump(exclude_unset=True)

    user = db.session.get(User, current_user.id)
    for field, value in changes.items():
        setattr(user, field, value)
    db.session.commit()

    logger.info("User %s updated profile fields %s", user.id, sorted(changes))
    return jsonify(user_payload(user))


@bp.route('/api/auth/logout', methods=['POST'])
@login_required
def logout():
    user_id = current_user.id
    logout_user()
    logger.info("User %s logged out", user_id)
    return jsonify({'message': 'Logged out successfully'})
