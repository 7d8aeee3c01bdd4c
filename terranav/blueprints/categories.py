from flask import Blueprint, jsonify
from flask_login import login_required
from terranav.extensions import db
from terranav.errors import NotFoundError, ValidationError
from terranav.middleware import admin_required, current_principal
from terranav.models import Category
from terranav.schemas import CategoryCreate
from terranav.serializers import category_payload
from terranav.services.audit_service import log_audit
from terranav.utils import parse_payload, request_payload
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('categories', __name__)


def _category_icon(slug: str) -> str:
    s = (slug or '').lower()
    # heuristic mapping for community resource categories
    if any(k in s for k in ['housing', 'home', 'shelter', 'rent']):
        return 'home'
    if any(k in s for k in ['food', 'meal', 'grocery', 'pantry']):
        return 'utensils'
    if any(k in s for k in ['job', 'employment', 'work', 'career']):
        return 'briefcase'
    if any(k in s for k in ['health', 'medical', 'clinic']):
        return 'heart-pulse'
    if any(k in s for k in ['education', 'school', 'course', 'book']):
        return 'book'
    if any(k in s for k in ['transport', 'ride', 'car', 'bike']):
        return 'car'
    if any(k in s for k in ['legal', 'law']):
        return 'scale'
    if any(k in s for k in ['community', 'volunteer', 'service']):
        return 'users'
    return 'tag'


@bp.route('/api/categories', methods=['GET'])
def list_categories():
    categories = Category.query.filter_by(
        is_active=True).order_by(Category.name.asc()).all()
    return jsonify([category_payload(c) for c in categories])


@bp.route('/api/categories/<slug>', methods=['GET'])
def get_category(slug):
    category = Category.query.filter_by(slug=slug, is_active=True).first()
    if category is None:
        raise NotFoundError('Category not found')
    return jsonify(category_payload(category))


@bp.route('/api/categories', methods=['POST'])
@login_required
@admin_required
def create_category():
    data = parse_payload(CategoryCreate, request_payload())

    # Check if slug already exists
    if Category.query.filter_by(slug=data.slug).first():
        raise ValidationError.for_field('slug', 'Slug already exists')

    category = Category(
        name=data.name,
        slug=data.slug,
        description=data.description,
        icon=data.icon or _category_icon(data.slug),
        color=data.color,
        is_active=data.is_active,
    )
    db.session.add(category)
    db.session.commit()

    log_audit(
        actor_id=current_principal().user_id,
        action='CATEGORY_CREATE',
        target_type='CATEGORY',
        target_id=category.id,
        payload={'name': category.name, 'slug': category.slug},
    )
    return jsonify(category_payload(category)), 201
