from flask import Blueprint, jsonify
from flask_login import login_required
from terranav.middleware import admin_required, current_principal
from terranav.services.audit_service import log_audit
from terranav.services.moderation_service import get_admin_stats
from terranav.services.seed_service import (
    seed_categories,
    seed_forum_posts,
    seed_marketplace,
)
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('admin', __name__)


@bp.route('/api/admin/stats', methods=['GET'])
@login_required
@admin_required
def stats():
    return jsonify(get_admin_stats())


@bp.route('/api/seed/marketplace', methods=['POST'])
@login_required
@admin_required
def seed_marketplace_data():
    user_id = current_principal().user_id
    seed_categories()
    listings = seed_marketplace(user_id)

    log_audit(
        actor_id=user_id,
        action='SEED_MARKETPLACE',
        target_type='LISTING',
        payload={'listings': len(listings)},
    )
    return jsonify({
        'message': 'Marketplace seeded successfully',
        'listingsCount': len(listings),
    })


@bp.route('/api/seed/forum-posts', methods=['POST'])
@login_required
@admin_required
def seed_forum_data():
    user_id = current_principal().user_id
    seed_categories()
    posts = seed_forum_posts(user_id)

    log_audit(
        actor_id=user_id,
        action='SEED_FORUM_POSTS',
        target_type='FORUM_POST',
        payload={'posts': len(posts)},
    )
    return jsonify({
        'message': 'Forum posts seeded successfully',
        'postsCount': len(posts),
    })
