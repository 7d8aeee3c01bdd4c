from flask import Blueprint, jsonify
from flask_login import login_required
from sqlalchemy.orm import joinedload
from terranav.extensions import db
from terranav.errors import AuthorizationError, NotFoundError
from terranav.middleware import current_principal, object_permission_required
from terranav.models import ForumPost
from terranav.schemas import ForumPostCreate, ForumPostUpdate
from terranav.serializers import forum_post_payload
from terranav.services.listing_service import ensure_category
from terranav.services.audit_service import log_audit
from terranav.utils import int_arg, parse_payload, request_payload
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('forum', __name__)

DEFAULT_LIMIT = 20
MAX_LIMIT = 100

MODERATION_FIELDS = ('is_pinned', 'is_locked')


def _post_query():
    return ForumPost.query.options(
        joinedload(ForumPost.author),
        joinedload(ForumPost.category),
    )


@bp.route('/api/forum/posts', methods=['GET'])
def list_posts():
    query = _post_query()

    category_id = int_arg('categoryId')
    if category_id:
        query = query.filter(ForumPost.category_id == category_id)

    limit = min(int_arg('limit', default=DEFAULT_LIMIT, minimum=1), MAX_LIMIT)
    offset = int_arg('offset', default=0, minimum=0)

    posts = query.order_by(
        ForumPost.is_pinned.desc(),
        ForumPost.created_at.desc(),
        ForumPost.id.desc(),
    ).limit(limit).offset(offset).all()
    return jsonify([forum_post_payload(p) for p in posts])


@bp.route('/api/forum/posts/<int:id>', methods=['GET'])
def get_post(id):
    updated = ForumPost.query.filter_by(id=id).update(
        {ForumPost.view_count: ForumPost.view_count + 1},
        synchronize_session=False,
    )
    db.session.commit()
    if not updated:
        raise NotFoundError('Forum post not found')

    db.session.expire_all()
    post = _post_query().filter(ForumPost.id == id).first()
    if post is None:
        raise NotFoundError('Forum post not found')
    return jsonify(forum_post_payload(post))


@bp.route('/api/forum/posts', methods=['POST'])
@login_required
def create_post():
    data = parse_payload(ForumPostCreate, request_payload())
    if data.category_id:
        ensure_category(data.category_id)

    post = ForumPost(
        user_id=current_principal().user_id,
        category_id=data.category_id,
        title=data.title,
        content=data.content,
        product_rating=data.product_rating,
        product_image=data.product_image,
    )
    db.session.add(post)
    db.session.commit()

    logger.info("Forum post %s created by %s", post.id, post.user_id)
    return jsonify(forum_post_payload(post)), 201


@bp.route('/api/forum/posts/<int:id>', methods=['PUT'])
@login_required
@object_permission_required(ForumPost, label='Forum post')
def update_post(id, resource=None):
    principal = current_principal()
    data = parse_payload(ForumPostUpdate, request_payload())
    changes = data.model_dump(exclude_unset=True)

    moderation = {f: changes[f] for f in MODERATION_FIELDS if f in changes}
    if moderation and not principal.is_admin:
        raise AuthorizationError('Only admins can pin or lock posts')

    if changes.get('category_id'):
        ensure_category(changes['category_id'])

    for field, value in changes.items():
        if value is None and field in ('title', 'content', *MODERATION_FIELDS):
            continue
        setattr(resource, field, value)
    db.session.commit()

    if moderation:
        log_audit(
            actor_id=principal.user_id,
            action='FORUM_POST_MODERATE',
            target_type='FORUM_POST',
            target_id=resource.id,
            payload=moderation,
        )
    return jsonify(forum_post_payload(resource))


@bp.route('/api/forum/posts/<int:id>', methods=['DELETE'])
@login_required
@object_permission_required(ForumPost, label='Forum post')
def delete_post(id, resource=None):
    db.session.delete(resource)
    db.session.commit()
    logger.info(
        "Forum post %s deleted by %s", id, current_principal().user_id)
    return jsonify({'message': 'Forum post deleted successfully'})
