from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import func

from terranav.extensions import db
from terranav.models import Review, UserRating
import logging

logger = logging.getLogger(__name__)

# Seller reputation is expressed on a 0-785 point scale
MAX_POINTS = 785


def points_for_average(average):
    points = Decimal(str(average)) / 5 * MAX_POINTS
    return int(points.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def get_user_rating(user_id):
    return UserRating.query.filter_by(user_id=user_id).first()


def calculate_user_rating(user_id):
    """Recompute the stored rating of ``user_id`` from all their reviews."""
    if not user_id:
        return None

    total_reviews, total_stars = db.session.query(
        func.count(Review.id),
        func.coalesce(func.sum(Review.rating), 0),
    ).filter(Review.reviewed_user_id == user_id).one()

    if total_reviews:
        average = total_stars / total_reviews
        points = points_for_average(average)
    else:
        average = 0.0
        points = 0

    rating = get_user_rating(user_id)
    if rating is None:
        rating = UserRating(user_id=user_id)
        db.session.add(rating)

    rating.total_reviews = total_reviews
    rating.average_rating = average
    rating.total_points = points
    rating.updated_at = datetime.utcnow()
    db.session.commit()

    logger.info(
        "Rating for %s: %s reviews, avg=%.2f, points=%s",
        user_id,
        total_reviews,
        average,
        points,
    )
    return rating
