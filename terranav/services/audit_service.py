from terranav.extensions import db
from terranav.models import AuditLog
from flask import has_request_context, request
from sqlalchemy.exc import SQLAlchemyError
import logging
import json

logger = logging.getLogger(__name__)


def _payload_brief(payload):
    if payload is None:
        return None
    brief = json.dumps(
        payload, ensure_ascii=False, separators=(
            ',', ':'), default=str)
    if len(brief) > 600:
        brief = brief[:600] + '...'
    return brief


def log_audit(
        actor_id=None,
        action='',
        target_type=None,
        target_id=None,
        payload=None):
    """Record a moderation action.

    A failed audit write is logged and rolled back; the action it
    describes has already been committed.
    """
    ip = None
    user_agent = None
    method = None
    path = None
    if has_request_context():
        ip = request.remote_addr
        user_agent = request.headers.get('User-Agent')
        method = request.method
        path = request.path

    try:
        audit = AuditLog(
            actor_id=actor_id,
            action=action,
            target_type=target_type,
            target_id=None if target_id is None else str(target_id),
            ip=ip,
            user_agent=(user_agent or '')[:500] or None,
        )
        if payload:
            audit.set_payload(payload)

        db.session.add(audit)
        db.session.commit()
    except SQLAlchemyError as e:
        logger.error(f"Failed to log audit: {e}", exc_info=True)
        db.session.rollback()
        return

    logger.info(
        "AUDIT action=%s actor_id=%s target_type=%s "
        "target_id=%s method=%s path=%s payload=%s",
        action,
        actor_id,
        target_type,
        target_id,
        method,
        path,
        _payload_brief(payload),
    )
