from flask import Blueprint, request, jsonify
from flask_login import login_required
from sqlalchemy.orm import joinedload
from terranav.extensions import db
from terranav.errors import ValidationError
from terranav.middleware import current_principal, object_permission_required
from terranav.models import Listing, Review, User
from terranav.schemas import ReviewCreate, ReviewUpdate
from terranav.serializers import rating_payload, review_payload
from terranav.services.rating_service import (
    calculate_user_rating,
    get_user_rating,
)
from terranav.utils import int_arg, parse_payload, request_payload
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('reviews', __name__)

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


@bp.route('/api/reviews', methods=['GET'])
def list_reviews():
    query = Review.query.options(joinedload(Review.reviewer))

    reviewed_user_id = request.args.get('reviewedUserId')
    if reviewed_user_id:
        query = query.filter(Review.reviewed_user_id == reviewed_user_id)

    listing_id = int_arg('listingId')
    if listing_id:
        query = query.filter(Review.listing_id == listing_id)

    limit = min(int_arg('limit', default=DEFAULT_LIMIT, minimum=1), MAX_LIMIT)
    offset = int_arg('offset', default=0, minimum=0)

    reviews = query.order_by(
        Review.created_at.desc(), Review.id.desc()
    ).limit(limit).offset(offset).all()
    return jsonify([review_payload(r) for r in reviews])


@bp.route('/api/reviews', methods=['POST'])
@login_required
def create_review():
    data = parse_payload(ReviewCreate, request_payload())
    principal = current_principal()

    reviewed_user_id = data.reviewed_user_id
    if data.listing_id:
        listing = db.session.get(Listing, data.listing_id)
        if listing is None:
            raise ValidationError.for_field('listingId', 'Unknown listing')
        # A listing review rates the seller unless told otherwise
        reviewed_user_id = reviewed_user_id or listing.user_id

    if reviewed_user_id:
        if db.session.get(User, reviewed_user_id) is None:
            raise ValidationError.for_field('reviewedUserId', 'Unknown user')
        if reviewed_user_id == principal.user_id:
            raise ValidationError.for_field(
                'reviewedUserId', 'You cannot review yourself')

    review = Review(
        reviewer_id=principal.user_id,
        reviewed_user_id=reviewed_user_id,
        listing_id=data.listing_id,
        rating=data.rating,
        comment=data.comment,
    )
    db.session.add(review)
    db.session.commit()

    logger.info(
        "Review %s by %s for user %s (rating=%s)",
        review.id,
        principal.user_id,
        reviewed_user_id,
        review.rating,
    )
    calculate_user_rating(reviewed_user_id)
    return jsonify(review_payload(review)), 201


@bp.route('/api/reviews/<int:id>', methods=['PUT'])
@login_required
@object_permission_required(Review, owner_field='reviewer_id', label='Review')
def update_review(id, resource=None):
    data = parse_payload(ReviewUpdate, request_payload())
    changes = data.model_dump(exclude_unset=True)

    if changes.get('rating') is not None:
        resource.rating = changes['rating']
    if 'comment' in changes:
        resource.comment = changes['comment']
    db.session.commit()

    calculate_user_rating(resource.reviewed_user_id)
    return jsonify(review_payload(resource))


@bp.route('/api/reviews/<int:id>', methods=['DELETE'])
@login_required
@object_permission_required(Review, owner_field='reviewer_id', label='Review')
def delete_review(id, resource=None):
    reviewed_user_id = resource.reviewed_user_id
    db.session.delete(resource)
    db.session.commit()

    calculate_user_rating(reviewed_user_id)
    logger.info(
        "Review %s deleted by %s", id, current_principal().user_id)
    return jsonify({'message': 'Review deleted successfully'})


@bp.route('/api/users/<user_id>/rating', methods=['GET'])
def user_rating(user_id):
    return jsonify(rating_payload(get_user_rating(user_id)))
