from terranav.extensions import db
from flask_login import UserMixin
from datetime import datetime
from sqlalchemy import CheckConstraint, UniqueConstraint
import enum
import json


# Status columns are plain strings; these are the values the UI offers.
class ListingStatus(enum.Enum):
    ACTIVE = 'active'
    SOLD = 'sold'
    SUSPENDED = 'suspended'


class PriceType(enum.Enum):
    FIXED = 'fixed'
    FREE = 'free'
    NEGOTIABLE = 'negotiable'


class ListingCondition(enum.Enum):
    NEW = 'new'
    LIKE_NEW = 'like_new'
    GOOD = 'good'
    FAIR = 'fair'
    POOR = 'poor'


class ReportStatus(enum.Enum):
    PENDING = 'pending'
    RESOLVED = 'resolved'
    DISMISSED = 'dismissed'


class User(UserMixin, db.Model):
    __tablename__ = 'users'

    # Issued by the identity provider (the token "sub" claim)
    id = db.Column(db.String(64), primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=True, index=True)
    first_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    profile_image_url = db.Column(db.String(500), nullable=True)
    phone = db.Column(db.String(30), nullable=True)
    is_verified = db.Column(db.Boolean, default=False, nullable=False)
    is_admin = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False)

    # Relationships
    listings = db.relationship(
        'Listing',
        back_populates='owner',
        lazy='dynamic')
    rating = db.relationship(
        'UserRating',
        backref='user',
        uselist=False,
        cascade='all, delete-orphan')
    cart_items = db.relationship(
        'CartItem',
        backref='user',
        lazy='dynamic',
        cascade='all, delete-orphan')
    wishlist_items = db.relationship(
        'WishlistItem',
        backref='user',
        lazy='dynamic',
        cascade='all, delete-orphan')

    def __repr__(self):
        return f'<User {self.id}>'


class Category(db.Model):
    __tablename__ = 'categories'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(100), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    icon = db.Column(db.String(50), nullable=True)
    # Hex colour, e.g. "#2f855a"
    color = db.Column(db.String(7), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False)

    listings = db.relationship(
        'Listing',
        back_populates='category',
        lazy='dynamic')

    def __repr__(self):
        return f'<Category {self.name}>'


class Listing(db.Model):
    __tablename__ = 'listings'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.String(64),
        db.ForeignKey('users.id'),
        nullable=False,
        index=True)
    category_id = db.Column(
        db.Integer,
        db.ForeignKey('categories.id'),
        nullable=False,
        index=True)
    title = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=True)
    price_type = db.Column(
        db.String(20),
        nullable=False,
        default=PriceType.FIXED.value)
    location = db.Column(db.String(200), nullable=True)
    # Ordered list of image URIs, e.g. ["/uploads/images-ab12.jpg"]
    images = db.Column(db.JSON, nullable=False, default=list)
    status = db.Column(
        db.String(20),
        nullable=False,
        default=ListingStatus.ACTIVE.value,
        index=True)
    condition = db.Column(
        db.String(20),
        nullable=True,
        default=ListingCondition.NEW.value)
    brand = db.Column(db.String(100), nullable=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    is_promoted = db.Column(db.Boolean, default=False, nullable=False)
    is_featured = db.Column(db.Boolean, default=False, nullable=False)
    view_count = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False)

    # Relationships
    owner = db.relationship(
        'User',
        foreign_keys=[user_id],
        back_populates='listings')
    category = db.relationship('Category', back_populates='listings')
    cart_items = db.relationship(
        'CartItem',
        backref='listing',
        lazy='dynamic',
        cascade='all, delete-orphan')
    wishlist_items = db.relationship(
        'WishlistItem',
        backref='listing',
        lazy='dynamic',
        cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Listing {self.title}>'


class Message(db.Model):
    __tablename__ = 'messages'

    id = db.Column(db.Integer, primary_key=True)
    sender_id = db.Column(
        db.String(64),
        db.ForeignKey('users.id'),
        nullable=False,
        index=True)
    receiver_id = db.Column(
        db.String(64),
        db.ForeignKey('users.id'),
        nullable=False,
        index=True)
    listing_id = db.Column(
        db.Integer,
        db.ForeignKey(
            'listings.id',
            ondelete='SET NULL'),
        nullable=True,
        index=True)
    content = db.Column(db.Text, nullable=False)
    is_read = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True)

    sender = db.relationship('User', foreign_keys=[sender_id])
    receiver = db.relationship('User', foreign_keys=[receiver_id])
    listing = db.relationship(
        'Listing',
        foreign_keys=[listing_id],
        backref=db.backref('messages', lazy='dynamic'))

    def __repr__(self):
        return f'<Message {self.id} {self.sender_id}->{self.receiver_id}>'


class Report(db.Model):
    __tablename__ = 'reports'

    id = db.Column(db.Integer, primary_key=True)
    reporter_id = db.Column(
        db.String(64),
        db.ForeignKey('users.id'),
        nullable=False,
        index=True)
    listing_id = db.Column(
        db.Integer,
        db.ForeignKey(
            'listings.id',
            ondelete='SET NULL'),
        nullable=True)
    reported_user_id = db.Column(
        db.String(64),
        db.ForeignKey('users.id'),
        nullable=True)
    reason = db.Column(db.String(500), nullable=False)
    description = db.Column(db.Text, nullable=True)
    # Admins may write any value; pending|resolved|dismissed in practice
    status = db.Column(
        db.String(20),
        nullable=False,
        default=ReportStatus.PENDING.value,
        index=True)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False)

    reporter = db.relationship('User', foreign_keys=[reporter_id])
    reported_user = db.relationship('User', foreign_keys=[reported_user_id])
    listing = db.relationship(
        'Listing',
        foreign_keys=[listing_id],
        backref=db.backref('reports', lazy='dynamic'))

    def __repr__(self):
        return f'<Report {self.id} status={self.status}>'


class ForumPost(db.Model):
    __tablename__ = 'forum_posts'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.String(64),
        db.ForeignKey('users.id'),
        nullable=False,
        index=True)
    category_id = db.Column(
        db.Integer,
        db.ForeignKey(
            'categories.id',
            ondelete='SET NULL'),
        nullable=True,
        index=True)
    title = db.Column(db.Text, nullable=False)
    content = db.Column(db.Text, nullable=False)
    # 1-5 stars when the post reviews a product
    product_rating = db.Column(db.Integer, nullable=True)
    product_image = db.Column(db.String(500), nullable=True)
    is_pinned = db.Column(db.Boolean, default=False, nullable=False)
    is_locked = db.Column(db.Boolean, default=False, nullable=False)
    view_count = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False)

    author = db.relationship('User', foreign_keys=[user_id])
    category = db.relationship('Category', foreign_keys=[category_id])
    comments = db.relationship(
        'Comment',
        backref='forum_post',
        lazy='dynamic',
        cascade='all, delete-orphan')

    __table_args__ = (
        CheckConstraint(
            'product_rating IS NULL OR '
            '(product_rating >= 1 AND product_rating <= 5)',
            name='ck_forum_post_product_rating'),
    )

    def __repr__(self):
        return f'<ForumPost {self.id}>'


class Comment(db.Model):
    __tablename__ = 'comments'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.String(64),
        db.ForeignKey('users.id'),
        nullable=False,
        index=True)
    listing_id = db.Column(
        db.Integer,
        db.ForeignKey(
            'listings.id',
            ondelete='CASCADE'),
        nullable=True,
        index=True)
    forum_post_id = db.Column(
        db.Integer,
        db.ForeignKey(
            'forum_posts.id',
            ondelete='CASCADE'),
        nullable=True,
        index=True)
    parent_id = db.Column(
        db.Integer,
        db.ForeignKey(
            'comments.id',
            ondelete='CASCADE'),
        nullable=True,
        index=True)
    content = db.Column(db.Text, nullable=False)
    is_edited = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False)

    author = db.relationship('User', foreign_keys=[user_id])
    listing = db.relationship(
        'Listing',
        foreign_keys=[listing_id],
        backref=db.backref(
            'comments',
            lazy='dynamic',
            cascade='all, delete-orphan'))
    replies = db.relationship(
        'Comment',
        backref=db.backref('parent', remote_side=[id]),
        lazy='dynamic',
        cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Comment {self.id}>'


class Review(db.Model):
    __tablename__ = 'reviews'

    id = db.Column(db.Integer, primary_key=True)
    reviewer_id = db.Column(
        db.String(64),
        db.ForeignKey('users.id'),
        nullable=False,
        index=True)
    reviewed_user_id = db.Column(
        db.String(64),
        db.ForeignKey('users.id'),
        nullable=True,
        index=True)
    listing_id = db.Column(
        db.Integer,
        db.ForeignKey(
            'listings.id',
            ondelete='SET NULL'),
        nullable=True,
        index=True)
    rating = db.Column(db.Integer, nullable=False)
    comment = db.Column(db.Text, nullable=True)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False)

    reviewer = db.relationship('User', foreign_keys=[reviewer_id])
    reviewed_user = db.relationship('User', foreign_keys=[reviewed_user_id])
    listing = db.relationship(
        'Listing',
        foreign_keys=[listing_id],
        backref=db.backref('reviews', lazy='dynamic'))

    __table_args__ = (
        CheckConstraint(
            'rating >= 1 AND rating <= 5',
            name='ck_review_rating'),
    )

    def __repr__(self):
        return f'<Review {self.id} rating={self.rating}>'


class UserRating(db.Model):
    __tablename__ = 'user_ratings'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.String(64),
        db.ForeignKey(
            'users.id',
            ondelete='CASCADE'),
        unique=True,
        nullable=False)
    total_points = db.Column(db.Integer, default=0, nullable=False)
    total_reviews = db.Column(db.Integer, default=0, nullable=False)
    average_rating = db.Column(db.Float, default=0, nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False)

    def __repr__(self):
        return f'<UserRating user={self.user_id} avg={self.average_rating}>'


class CartItem(db.Model):
    __tablename__ = 'cart_items'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.String(64),
        db.ForeignKey(
            'users.id',
            ondelete='CASCADE'),
        nullable=False,
        index=True)
    listing_id = db.Column(
        db.Integer,
        db.ForeignKey(
            'listings.id',
            ondelete='CASCADE'),
        nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False)

    __table_args__ = (
        CheckConstraint('quantity > 0', name='ck_cart_item_quantity'),
    )

    def __repr__(self):
        return f'<CartItem {self.id} listing={self.listing_id}>'


class WishlistItem(db.Model):
    __tablename__ = 'wishlist_items'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.String(64),
        db.ForeignKey(
            'users.id',
            ondelete='CASCADE'),
        nullable=False,
        index=True)
    listing_id = db.Column(
        db.Integer,
        db.ForeignKey(
            'listings.id',
            ondelete='CASCADE'),
        nullable=False)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False)

    __table_args__ = (
        UniqueConstraint(
            'user_id',
            'listing_id',
            name='uq_wishlist_user_listing'),
    )

    def __repr__(self):
        return f'<WishlistItem user={self.user_id} listing={self.listing_id}>'


class AuditLog(db.Model):
    __tablename__ = 'audit_logs'

    id = db.Column(db.Integer, primary_key=True)
    actor_id = db.Column(
        db.String(64),
        db.ForeignKey(
            'users.id',
            ondelete='SET NULL'),
        nullable=True)
    # e.g., LISTING_STATUS_UPDATE, REPORT_STATUS_UPDATE
    action = db.Column(db.String(100), nullable=False)
    # LISTING, REPORT, CATEGORY, etc.
    target_type = db.Column(db.String(50), nullable=True)
    target_id = db.Column(db.String(64), nullable=True)
    ip = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.String(500), nullable=True)
    # JSON format key field snapshot
    payload_json = db.Column(db.Text, nullable=True)
    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True)

    actor = db.relationship('User', foreign_keys=[actor_id])

    def set_payload(self, data):
        self.payload_json = json.dumps(data, ensure_ascii=False)

    def get_payload(self):
        if self.payload_json:
            return json.loads(self.payload_json)
        return {}

    def __repr__(self):
        return f'<AuditLog {self.id} action={self.action}>'
