from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required
from terranav.errors import AuthorizationError
from terranav.middleware import current_principal, object_permission_required
from terranav.models import Listing, ListingStatus
from terranav.schemas import ListingCreate, ListingUpdate
from terranav.serializers import listing_payload
from terranav.services import listing_service
from terranav.services.audit_service import log_audit
from terranav.services.image_storage import save_listing_images
from terranav.utils import float_arg, int_arg, parse_payload, request_payload
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('listings', __name__)

# Columns that reject NULL; an explicit null in an update is ignored
NOT_NULL_FIELDS = (
    'title',
    'description',
    'category_id',
    'price_type',
    'quantity',
    'images',
    'status',
    'is_promoted',
    'is_featured',
)

# Marketplace-wide placement flags
ADMIN_ONLY_FIELDS = ('is_promoted', 'is_featured')


@bp.route('/api/listings', methods=['GET'])
def list_listings():
    listings = listing_service.list_listings(
        category_id=int_arg('categoryId'),
        user_id=request.args.get('userId') or None,
        search=request.args.get('search') or None,
        # An explicit empty status (?status=) lists every status
        status=request.args.get('status', ListingStatus.ACTIVE.value),
        condition=request.args.get('condition') or None,
        brand=request.args.get('brand') or None,
        min_price=float_arg('minPrice'),
        max_price=float_arg('maxPrice'),
        sort_by=request.args.get('sortBy') or 'newest',
        limit=int_arg(
            'limit',
            default=current_app.config['LISTINGS_PER_PAGE'],
            minimum=1),
        offset=int_arg('offset', default=0, minimum=0),
    )
    return jsonify([listing_payload(listing) for listing in listings])


@bp.route('/api/listings/<int:id>', methods=['GET'])
def get_listing(id):
    listing = listing_service.get_listing(id)
    return jsonify(listing_payload(listing))


@bp.route('/api/listings', methods=['POST'])
@login_required
def create_listing():
    data = parse_payload(ListingCreate, request_payload())
    listing_service.ensure_category(data.category_id)

    # Files are written only once the payload is known to be valid
    images = save_listing_images(request.files.getlist('images'))
    listing = listing_service.create_listing(
        current_principal().user_id, data, images)
    return jsonify(listing_payload(listing)), 201


@bp.route('/api/listings/<int:id>', methods=['PUT'])
@login_required
@object_permission_required(Listing, label='Listing')
def update_listing(id, resource=None):
    listing = resource
    principal = current_principal()

    data = parse_payload(ListingUpdate, request_payload())
    changes = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field not in NOT_NULL_FIELDS
    }

    for field in ADMIN_ONLY_FIELDS:
        if field in changes and not principal.is_admin:
            raise AuthorizationError(
                'Only admins can change listing placement')

    if 'category_id' in changes:
        listing_service.ensure_category(changes['category_id'])

    uploaded = save_listing_images(request.files.getlist('images'))
    if uploaded:
        # New uploads replace the stored image list
        changes['images'] = uploaded

    status = changes.pop('status', None)
    listing_service.update_listing(listing, changes)

    if status is not None and status != listing.status:
        previous = listing_service.set_listing_status(listing, status)
        log_audit(
            actor_id=principal.user_id,
            action='LISTING_STATUS_UPDATE',
            target_type='LISTING',
            target_id=listing.id,
            payload={'from': previous, 'to': status},
        )

    logger.info(
        "Listing %s updated by %s (%s)",
        listing.id,
        principal.user_id,
        ', '.join(sorted(changes)) or 'no field changes',
    )
    return jsonify(listing_payload(listing))


@bp.route('/api/listings/<int:id>', methods=['DELETE'])
@login_required
@object_permission_required(Listing, label='Listing')
def delete_listing(id, resource=None):
    principal = current_principal()
    owner_id = resource.user_id
    listing_service.delete_listing(resource)

    log_audit(
        actor_id=principal.user_id,
        action='LISTING_DELETE',
        target_type='LISTING',
        target_id=id,
        payload={'owner_id': owner_id},
    )
    return jsonify({'message': 'Listing deleted successfully'})
