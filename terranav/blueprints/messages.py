from flask import Blueprint, jsonify
from flask_login import login_required
from terranav.middleware import current_principal, object_permission_required
from terranav.models import Message
from terranav.schemas import MessageCreate
from terranav.serializers import message_payload
from terranav.services import message_service
from terranav.utils import int_arg, parse_payload, request_payload
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('messages', __name__)


@bp.route('/api/messages', methods=['GET'])
@login_required
def list_messages():
    messages = message_service.get_messages(
        current_principal().user_id,
        listing_id=int_arg('listingId'),
    )
    return jsonify([message_payload(m) for m in messages])


@bp.route('/api/conversations', methods=['GET'])
@login_required
def list_conversations():
    messages = message_service.get_conversations(current_principal().user_id)
    return jsonify([message_payload(m) for m in messages])


@bp.route('/api/messages', methods=['POST'])
@login_required
def send_message():
    data = parse_payload(MessageCreate, request_payload())
    message = message_service.create_message(
        current_principal().user_id, data)
    return jsonify(message_payload(message)), 201


@bp.route('/api/messages/<int:id>/read', methods=['PUT'])
@login_required
@object_permission_required(
    Message, owner_field='receiver_id', label='Message')
def mark_read(id, resource=None):
    message_service.mark_as_read(resource)
    return jsonify({'message': 'Message marked as read'})
