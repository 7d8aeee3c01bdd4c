from terranav.extensions import db
from terranav.models import Listing, Message, User
from terranav.errors import ValidationError
from sqlalchemy import or_
from sqlalchemy.orm import joinedload
import logging

logger = logging.getLogger(__name__)


def get_messages(user_id, listing_id=None):
    """Every message the user sent or received, newest first.

    No threading happens here; clients group by counterpart and listing.
    """
    query = Message.query.options(
        joinedload(Message.sender),
        joinedload(Message.receiver),
        joinedload(Message.listing),
    ).filter(
        or_(
            Message.sender_id == user_id,
            Message.receiver_id == user_id,
        )
    )

    if listing_id:
        query = query.filter(Message.listing_id == listing_id)

    return query.order_by(
        Message.created_at.desc(), Message.id.desc()).all()


def get_conversations(user_id):
    return get_messages(user_id)


def create_message(sender_id, data):
    if db.session.get(User, data.receiver_id) is None:
        raise ValidationError.for_field('receiverId', 'Unknown user')

    if data.listing_id and db.session.get(Listing, data.listing_id) is None:
        raise ValidationError.for_field('listingId', 'Unknown listing')

    message = Message(
        sender_id=sender_id,
        receiver_id=data.receiver_id,
        listing_id=data.listing_id,
        content=data.content,
        is_read=False,
    )
    db.session.add(message)
    db.session.commit()

    logger.info(
        "Message %s sent %s -> %s (listing=%s)",
        message.id,
        sender_id,
        data.receiver_id,
        data.listing_id,
    )
    return message


def mark_as_read(message):
    if not message.is_read:
        message.is_read = True
        db.session.commit()
    return message
