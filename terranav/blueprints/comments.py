from flask import Blueprint, request, jsonify
from flask_login import login_required
from sqlalchemy.orm import joinedload
from terranav.extensions import db
from terranav.errors import AuthorizationError, ValidationError
from terranav.middleware import current_principal, object_permission_required
from terranav.models import Comment, ForumPost, Listing
from terranav.schemas import CommentCreate, CommentUpdate
from terranav.serializers import comment_payload
from terranav.utils import int_arg, parse_payload, request_payload
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('comments', __name__)


@bp.route('/api/comments', methods=['GET'])
def list_comments():
    query = Comment.query.options(joinedload(Comment.author))

    listing_id = int_arg('listingId')
    if listing_id:
        query = query.filter(Comment.listing_id == listing_id)

    forum_post_id = int_arg('forumPostId')
    if forum_post_id:
        query = query.filter(Comment.forum_post_id == forum_post_id)

    # parentId=null selects top-level comments only
    if request.args.get('parentId') == 'null':
        query = query.filter(Comment.parent_id.is_(None))
    else:
        parent_id = int_arg('parentId')
        if parent_id:
            query = query.filter(Comment.parent_id == parent_id)

    comments = query.order_by(
        Comment.created_at.asc(), Comment.id.asc()).all()
    return jsonify([comment_payload(c) for c in comments])


@bp.route('/api/comments', methods=['POST'])
@login_required
def create_comment():
    data = parse_payload(CommentCreate, request_payload())
    principal = current_principal()

    if data.listing_id and db.session.get(Listing, data.listing_id) is None:
        raise ValidationError.for_field('listingId', 'Unknown listing')

    if data.forum_post_id:
        post = db.session.get(ForumPost, data.forum_post_id)
        if post is None:
            raise ValidationError.for_field('forumPostId', 'Unknown post')
        if post.is_locked and not principal.is_admin:
            raise AuthorizationError('This post is locked')

    if data.parent_id:
        parent = db.session.get(Comment, data.parent_id)
        # A reply stays on the thread of its parent
        if (
            parent is None
            or parent.listing_id != data.listing_id
            or parent.forum_post_id != data.forum_post_id
        ):
            raise ValidationError.for_field('parentId', 'Unknown comment')

    comment = Comment(
        user_id=principal.user_id,
        listing_id=data.listing_id,
        forum_post_id=data.forum_post_id,
        parent_id=data.parent_id,
        content=data.content,
    )
    db.session.add(comment)
    db.session.commit()

    logger.info(
        "Comment %s by %s (listing=%s, post=%s)",
        comment.id,
        principal.user_id,
        comment.listing_id,
        comment.forum_post_id,
    )
    return jsonify(comment_payload(comment)), 201


@bp.route('/api/comments/<int:id>', methods=['PUT'])
@login_required
@object_permission_required(Comment, label='Comment')
def update_comment(id, resource=None):
    data = parse_payload(CommentUpdate, request_payload())
    resource.content = data.content
    resource.is_edited = True
    db.session.commit()
    return jsonify(comment_payload(resource))


@bp.route('/api/comments/<int:id>', methods=['DELETE'])
@login_required
@object_permission_required(Comment, label='Comment')
def delete_comment(id, resource=None):
    # Replies go with their parent
    db.session.delete(resource)
    db.session.commit()
    logger.info(
        "Comment %s deleted by %s", id, current_principal().user_id)
    return jsonify({'message': 'Comment deleted successfully'})
