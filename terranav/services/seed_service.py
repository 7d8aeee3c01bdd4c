"""Reference categories and demo content for fresh installs."""
from decimal import Decimal

from terranav.extensions import db
from terranav.models import Category, ForumPost, Listing
import logging

logger = logging.getLogger(__name__)

CATEGORIES = [
    {"name": "Housing", "slug": "housing", "icon": "home",
     "color": "#2f855a",
     "description": "Rooms, apartments and shared housing"},
    {"name": "Food", "slug": "food", "icon": "utensils",
     "color": "#dd6b20",
     "description": "Meals, groceries and food programs"},
    {"name": "Employment", "slug": "employment", "icon": "briefcase",
     "color": "#2b6cb0",
     "description": "Jobs, apprenticeships and gigs"},
    {"name": "Healthcare", "slug": "healthcare", "icon": "heart-pulse",
     "color": "#c53030",
     "description": "Clinics, checkups and support groups"},
    {"name": "Education", "slug": "education", "icon": "book",
     "color": "#6b46c1",
     "description": "Courses, tutoring and training"},
    {"name": "Transportation", "slug": "transportation", "icon": "car",
     "color": "#4a5568",
     "description": "Rides, bikes and vehicles"},
    {"name": "Legal Aid", "slug": "legal-aid", "icon": "scale",
     "color": "#975a16",
     "description": "Legal clinics and advice"},
    {"name": "Community Services", "slug": "community-services",
     "icon": "users", "color": "#2c7a7b",
     "description": "Volunteering and local programs"},
]

SAMPLE_LISTINGS = {
    "housing": [
        {
            "title": "Modern Studio Apartment Downtown",
            "description": (
                "Fully furnished studio apartment in the heart of downtown. "
                "Modern kitchen, high-speed internet and gym access."
            ),
            "price": Decimal("850.00"),
            "price_type": "fixed",
            "location": "Downtown District",
            "is_featured": True,
        },
        {
            "title": "Shared Room in Family Home",
            "description": (
                "Comfortable shared room in a quiet family home. "
                "Utilities and WiFi included."
            ),
            "price": Decimal("400.00"),
            "price_type": "fixed",
            "location": "Residential Area",
            "condition": "good",
        },
    ],
    "food": [
        {
            "title": "Weekly Meal Prep Service",
            "description": (
                "Healthy, portion-controlled meals prepared fresh weekly. "
                "Vegetarian, keto and gluten-free options."
            ),
            "price": Decimal("8.50"),
            "price_type": "fixed",
            "location": "Citywide Delivery",
            "is_featured": True,
        },
        {
            "title": "Community Food Share Program",
            "description": (
                "Free fresh produce and pantry items for families in need, "
                "every Saturday morning at the community center."
            ),
            "price": Decimal("0.00"),
            "price_type": "free",
            "location": "Community Center",
        },
    ],
    "employment": [
        {
            "title": "Trades Apprenticeship Program",
            "description": (
                "Paid apprenticeship for electrical, plumbing and HVAC "
                "trades. Earn while you learn."
            ),
            "price": None,
            "price_type": "free",
            "location": "Training Center",
        },
    ],
    "healthcare": [
        {
            "title": "Affordable Health Checkup Package",
            "description": (
                "Blood work, physical exam and consultation. Sliding scale "
                "pricing available."
            ),
            "price": Decimal("150.00"),
            "price_type": "negotiable",
            "location": "Health Clinic",
        },
    ],
}

SAMPLE_FORUM_POSTS = {
    "housing": [
        {
            "title": "Affordable 2BR Apartment - $850/month",
            "content": (
                "Recently renovated 2-bedroom apartment downtown. In-unit "
                "washer/dryer, parking included, pet-friendly."
            ),
            "product_rating": 4,
        },
    ],
    "food": [
        {
            "title": "Best places for fresh produce on a budget?",
            "content": (
                "Share the markets and food programs that helped you "
                "stretch your grocery budget."
            ),
        },
    ],
    "employment": [
        {
            "title": "Tips for landing a first apprenticeship",
            "content": (
                "What helped you get into the trades? Post your advice "
                "for people just starting out."
            ),
        },
    ],
}


def seed_categories():
    """Create missing reference categories; returns {slug: Category}."""
    by_slug = {}
    for data in CATEGORIES:
        category = Category.query.filter_by(slug=data["slug"]).first()
        if category is None:
            category = Category(is_active=True, **data)
            db.session.add(category)
            db.session.flush()
            logger.info("Created category: %s", data["name"])
        by_slug[data["slug"]] = category
    db.session.commit()
    return by_slug


def _active_categories_by_slug():
    return {
        c.slug: c for c in Category.query.filter_by(is_active=True).all()
    }


def seed_marketplace(user_id):
    """Add the sample listings, owned by ``user_id``, to known categories."""
    categories = _active_categories_by_slug()
    created = []
    for slug, listings in SAMPLE_LISTINGS.items():
        category = categories.get(slug)
        if category is None:
            continue
        for data in listings:
            listing = Listing(
                user_id=user_id,
                category_id=category.id,
                images=[],
                **data,
            )
            db.session.add(listing)
            created.append(listing)
    db.session.commit()
    logger.info("Seeded %s sample listings for %s", len(created), user_id)
    return created


def seed_forum_posts(user_id):
    categories = _active_categories_by_slug()
    created = []
    for slug, posts in SAMPLE_FORUM_POSTS.items():
        category = categories.get(slug)
        if category is None:
            continue
        for data in posts:
            post = ForumPost(user_id=user_id, category_id=category.id, **data)
            db.session.add(post)
            created.append(post)
    db.session.commit()
    logger.info("Seeded %s forum posts for %s", len(created), user_id)
    return created
