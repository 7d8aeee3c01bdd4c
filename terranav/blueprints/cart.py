from flask import Blueprint, jsonify
from flask_login import login_required
from sqlalchemy import func
from sqlalchemy.orm import joinedload
from terranav.extensions import db
from terranav.errors import NotFoundError, ValidationError
from terranav.middleware import current_principal
from terranav.models import CartItem, Listing, WishlistItem
from terranav.schemas import CartAdd, CartUpdate, WishlistToggle
from terranav.serializers import cart_item_payload
from terranav.utils import MAX_DB_INT, parse_payload, request_payload
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('cart', __name__)


def _own_cart_item(item_id):
    # Other users' items are indistinguishable from missing ones
    item = CartItem.query.filter_by(
        id=item_id,
        user_id=current_principal().user_id,
    ).first()
    if item is None:
        raise NotFoundError('Cart item not found')
    return item


def _existing_listing(listing_id):
    listing = db.session.get(Listing, listing_id)
    if listing is None:
        raise ValidationError.for_field('listingId', 'Unknown listing')
    return listing


@bp.route('/api/cart', methods=['GET'])
@login_required
def get_cart():
    items = CartItem.query.options(
        joinedload(CartItem.listing).joinedload(Listing.owner),
    ).filter(
        CartItem.user_id == current_principal().user_id
    ).order_by(CartItem.created_at.desc(), CartItem.id.desc()).all()
    return jsonify([cart_item_payload(item) for item in items])


@bp.route('/api/cart/count', methods=['GET'])
@login_required
def get_cart_count():
    total = db.session.query(
        func.coalesce(func.sum(CartItem.quantity), 0)
    ).filter(CartItem.user_id == current_principal().user_id).scalar()
    return jsonify({'count': int(total)})


@bp.route('/api/cart', methods=['POST'])
@login_required
def add_cart_item():
    data = parse_payload(CartAdd, request_payload())
    user_id = current_principal().user_id
    _existing_listing(data.listing_id)

    # Check if already exists
    item = CartItem.query.filter_by(
        user_id=user_id,
        listing_id=data.listing_id,
    ).first()

    if item:
        if item.quantity + data.quantity > MAX_DB_INT:
            raise ValidationError.for_field('quantity', 'Quantity too large')
        item.quantity += data.quantity
    else:
        item = CartItem(
            user_id=user_id,
            listing_id=data.listing_id,
            quantity=data.quantity,
        )
        db.session.add(item)

    db.session.commit()
    return jsonify(cart_item_payload(item)), 201


@bp.route('/api/cart/<int:id>', methods=['PATCH'])
@login_required
def update_cart_item(id):
    data = parse_payload(CartUpdate, request_payload())
    item = _own_cart_item(id)
    item.quantity = data.quantity
    db.session.commit()
    return jsonify(cart_item_payload(item))


@bp.route('/api/cart/<int:id>', methods=['DELETE'])
@login_required
def delete_cart_item(id):
    item = _own_cart_item(id)
    db.session.delete(item)
    db.session.commit()
    return jsonify({'message': 'Item removed from cart'})


@bp.route('/api/wishlist', methods=['GET'])
@login_required
def get_wishlist():
    items = WishlistItem.query.filter_by(
        user_id=current_principal().user_id
    ).order_by(WishlistItem.created_at.desc(), WishlistItem.id.desc()).all()
    return jsonify([item.listing_id for item in items])


@bp.route('/api/wishlist/toggle', methods=['POST'])
@login_required
def toggle_wishlist():
    data = parse_payload(WishlistToggle, request_payload())
    user_id = current_principal().user_id
    _existing_listing(data.listing_id)

    item = WishlistItem.query.filter_by(
        user_id=user_id,
        listing_id=data.listing_id,
    ).first()

    if item:
        db.session.delete(item)
        db.session.commit()
        return jsonify({'added': False, 'message': 'Removed from wishlist'})

    db.session.add(WishlistItem(user_id=user_id, listing_id=data.listing_id))
    db.session.commit()
    return jsonify({'added': True, 'message': 'Added to wishlist'})
