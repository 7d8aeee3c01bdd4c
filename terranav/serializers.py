"""JSON shapes returned by the API (camelCase, matching the web client)."""
from terranav.utils import format_price


def _iso(value):
    return value.isoformat() if value else None


def _money(value):
    return None if value is None else f'{value:.2f}'


def user_payload(user):
    if user is None:
        return None
    return {
        'id': user.id,
        'email': user.email,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'profileImageUrl': user.profile_image_url,
        'phone': user.phone,
        'isVerified': user.is_verified,
        'isAdmin': user.is_admin,
        'createdAt': _iso(user.created_at),
        'updatedAt': _iso(user.updated_at),
    }


def user_summary(user, verified=True):
    if user is None:
        return None
    summary = {
        'id': user.id,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'profileImageUrl': user.profile_image_url,
    }
    if verified:
        summary['isVerified'] = user.is_verified
    return summary


def category_payload(category):
    return {
        'id': category.id,
        'name': category.name,
        'slug': category.slug,
        'description': category.description,
        'icon': category.icon,
        'color': category.color,
        'isActive': category.is_active,
        'createdAt': _iso(category.created_at),
    }


def category_summary(category):
    if category is None:
        return None
    return {
        'id': category.id,
        'name': category.name,
        'slug': category.slug,
        'icon': category.icon,
        'color': category.color,
    }


def listing_payload(listing, with_relations=True):
    payload = {
        'id': listing.id,
        'userId': listing.user_id,
        'categoryId': listing.category_id,
        'title': listing.title,
        'description': listing.description,
        'price': _money(listing.price),
        'priceType': listing.price_type,
        'priceDisplay': format_price(listing.price_type, listing.price),
        'location': listing.location,
        'images': list(listing.images or []),
        'status': listing.status,
        'condition': listing.condition,
        'brand': listing.brand,
        'quantity': listing.quantity,
        'isPromoted': listing.is_promoted,
        'isFeatured': listing.is_featured,
        'viewCount': listing.view_count,
        'createdAt': _iso(listing.created_at),
        'updatedAt': _iso(listing.updated_at),
    }
    if with_relations:
        payload['user'] = user_summary(listing.owner)
        payload['category'] = category_summary(listing.category)
    return payload


def message_payload(message):
    return {
        'id': message.id,
        'senderId': message.sender_id,
        'receiverId': message.receiver_id,
        'listingId': message.listing_id,
        'content': message.content,
        'isRead': message.is_read,
        'createdAt': _iso(message.created_at),
        'sender': user_summary(message.sender, verified=False),
        'receiver': user_summary(message.receiver, verified=False),
        'listing': None if message.listing is None else {
            'id': message.listing.id,
            'title': message.listing.title,
        },
    }


def report_payload(report):
    return {
        'id': report.id,
        'reporterId': report.reporter_id,
        'listingId': report.listing_id,
        'reportedUserId': report.reported_user_id,
        'reason': report.reason,
        'description': report.description,
        'status': report.status,
        'createdAt': _iso(report.created_at),
    }


def comment_payload(comment):
    return {
        'id': comment.id,
        'userId': comment.user_id,
        'listingId': comment.listing_id,
        'forumPostId': comment.forum_post_id,
        'parentId': comment.parent_id,
        'content': comment.content,
        'isEdited': comment.is_edited,
        'createdAt': _iso(comment.created_at),
        'updatedAt': _iso(comment.updated_at),
        'user': user_summary(comment.author),
    }


def forum_post_payload(post):
    return {
        'id': post.id,
        'userId': post.user_id,
        'categoryId': post.category_id,
        'title': post.title,
        'content': post.content,
        'productRating': post.product_rating,
        'productImage': post.product_image,
        'isPinned': post.is_pinned,
        'isLocked': post.is_locked,
        'viewCount': post.view_count,
        'createdAt': _iso(post.created_at),
        'updatedAt': _iso(post.updated_at),
        'user': user_summary(post.author),
        'category': category_summary(post.category),
    }


def review_payload(review):
    return {
        'id': review.id,
        'reviewerId': review.reviewer_id,
        'reviewedUserId': review.reviewed_user_id,
        'listingId': review.listing_id,
        'rating': review.rating,
        'comment': review.comment,
        'createdAt': _iso(review.created_at),
        'updatedAt': _iso(review.updated_at),
        'reviewer': user_summary(review.reviewer),
    }


def rating_payload(rating):
    if rating is None:
        return {'totalPoints': 0, 'totalReviews': 0, 'averageRating': 0}
    return {
        'totalPoints': rating.total_points,
        'totalReviews': rating.total_reviews,
        'averageRating': rating.average_rating,
    }


def cart_item_payload(item):
    listing = item.listing
    return {
        'id': item.id,
        'quantity': item.quantity,
        'createdAt': _iso(item.created_at),
        'listing': {
            'id': listing.id,
            'title': listing.title,
            'price': _money(listing.price),
            'priceDisplay': format_price(listing.price_type, listing.price),
            'images': list(listing.images or []),
            'user': {
                'id': listing.owner.id,
                'firstName': listing.owner.first_name,
                'lastName': listing.owner.last_name,
            },
        },
    }
