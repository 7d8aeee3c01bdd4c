from terranav.extensions import db
from terranav.models import Category, Listing, ListingStatus
from terranav.errors import NotFoundError, ValidationError
from sqlalchemy import or_
from sqlalchemy.orm import joinedload
from terranav.utils import escape_text
import logging

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20
MAX_LIMIT = 100

SORT_ORDERS = {
    'newest': lambda: [Listing.created_at.desc(), Listing.id.desc()],
    'oldest': lambda: [Listing.created_at.asc(), Listing.id.asc()],
    'price_low': lambda: [Listing.price.asc(), Listing.id.desc()],
    'price_high': lambda: [Listing.price.desc(), Listing.id.desc()],
    'most_viewed': lambda: [Listing.view_count.desc(), Listing.id.desc()],
}


def _base_query():
    return Listing.query.options(
        joinedload(Listing.owner),
        joinedload(Listing.category),
    )


def list_listings(
        category_id=None,
        user_id=None,
        search=None,
        status=ListingStatus.ACTIVE.value,
        condition=None,
        brand=None,
        min_price=None,
        max_price=None,
        sort_by='newest',
        limit=DEFAULT_LIMIT,
        offset=0):
    """Page of listings with owner and category loaded.

    ``status`` defaults to "active"; an explicit falsy value (None or "")
    disables the status filter. Promoted listings always sort first.
    """
    query = _base_query()

    if status:
        query = query.filter(Listing.status == status)

    if category_id:
        query = query.filter(Listing.category_id == category_id)

    if user_id:
        query = query.filter(Listing.user_id == user_id)

    # Keyword search: plain substring over title or description. Both
    # columns hold HTML-escaped text, so the escaped term is matched too.
    if search:
        terms = {search, escape_text(search)}
        query = query.filter(
            or_(*(
                column.contains(term, autoescape=True)
                for term in terms
                for column in (Listing.title, Listing.description)
            ))
        )

    if condition:
        query = query.filter(Listing.condition == condition)

    if brand:
        query = query.filter(Listing.brand == brand)

    if min_price is not None:
        query = query.filter(Listing.price >= min_price)

    if max_price is not None:
        query = query.filter(Listing.price <= max_price)

    order = SORT_ORDERS.get(sort_by or 'newest', SORT_ORDERS['newest'])
    query = query.order_by(Listing.is_promoted.desc(), *order())

    limit = DEFAULT_LIMIT if limit is None else min(limit, MAX_LIMIT)
    return query.limit(limit).offset(offset or 0).all()


def increment_view_count(listing_id):
    updated = Listing.query.filter_by(id=listing_id).update(
        {Listing.view_count: Listing.view_count + 1},
        synchronize_session=False,
    )
    db.session.commit()
    return updated


def get_listing(listing_id, count_view=True):
    """Fetch one listing; every counted fetch adds one view.

    Views are not de-duplicated per viewer.
    """
    if count_view:
        if not increment_view_count(listing_id):
            raise NotFoundError('Listing not found')
        # The bulk UPDATE bypasses the identity map
        db.session.expire_all()

    listing = _base_query().filter(Listing.id == listing_id).first()
    if listing is None:
        raise NotFoundError('Listing not found')
    return listing


def ensure_category(category_id):
    category = db.session.get(Category, category_id)
    if category is None:
        raise ValidationError.for_field('categoryId', 'Unknown category')
    return category


def create_listing(owner_id, data, images):
    listing = Listing(
        user_id=owner_id,
        category_id=data.category_id,
        title=data.title,
        description=data.description,
        price=data.price,
        price_type=data.price_type,
        location=data.location,
        condition=data.condition or 'new',
        brand=data.brand,
        quantity=data.quantity,
        images=list(data.images) + list(images),
        status=ListingStatus.ACTIVE.value,
    )
    db.session.add(listing)
    db.session.commit()

    logger.info(
        "Listing %s created by %s in category %s",
        listing.id,
        owner_id,
        listing.category_id,
    )
    return listing


def update_listing(listing, changes):
    """Apply a dict of column changes; status is written as given."""
    for field, value in changes.items():
        setattr(listing, field, value)
    db.session.commit()
    return listing


def set_listing_status(listing, status):
    previous = listing.status
    listing.status = status
    db.session.commit()
    logger.info(
        "Listing %s status %s -> %s", listing.id, previous, status)
    return previous


def delete_listing(listing):
    listing_id = listing.id
    db.session.delete(listing)
    db.session.commit()
    logger.info("Listing %s deleted", listing_id)
