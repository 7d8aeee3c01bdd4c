"""Verification of identity tokens issued by the external provider.

The provider signs a small claims document (``sub``, ``email`` and profile
names) with a secret shared with this service. Sessions are never minted
here; ``issue_identity_token`` exists for the provider side, local seeding
and tests.
"""
from flask import current_app
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
import logging

logger = logging.getLogger(__name__)

TOKEN_SALT = 'terranav-identity'


def _serializer():
    return URLSafeTimedSerializer(
        current_app.config['IDENTITY_TOKEN_SECRET'],
        salt=TOKEN_SALT,
    )


def issue_identity_token(claims: dict) -> str:
    if not claims.get('sub'):
        raise ValueError('Identity claims require a "sub" value')
    return _serializer().dumps(claims)


def verify_identity_token(token: str):
    """Return the claims dict for a valid token, otherwise None."""
    if not token:
        return None
    try:
        claims = _serializer().loads(
            token,
            max_age=current_app.config['IDENTITY_TOKEN_MAX_AGE'],
        )
    except SignatureExpired:
        logger.info("Rejected expired identity token")
        return None
    except BadSignature:
        logger.warning("Rejected identity token with bad signature")
        return None

    if not isinstance(claims, dict) or not claims.get('sub'):
        logger.warning("Rejected identity token without subject")
        return None
    return claims
