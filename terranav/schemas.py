"""Request payload models.

Field names are snake_case in Python and camelCase on the wire
(``categoryId``, ``priceType`` ...). Unknown keys are ignored, so a client
cannot smuggle server-owned fields such as ``reporterId`` or ``viewCount``
into a row.
"""
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from terranav.utils import MAX_DB_INT, escape_text, sanitize_html

PriceTypeValue = Literal['fixed', 'free', 'negotiable']
ConditionValue = Literal['new', 'like_new', 'good', 'fair', 'poor']

SLUG_PATTERN = r'^[a-z0-9-]+$'
COLOR_PATTERN = r'^#[0-9a-fA-F]{6}$'


class Payload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra='ignore',
    )


def _escaped_title(value, max_length=200):
    if value is None:
        return value
    escaped = escape_text(value)
    if len(escaped) > max_length:
        raise ValueError(f'Title must be at most {max_length} characters')
    return escaped


# --- Identity / profile ---

class IdentityCallback(Payload):
    token: str = Field(min_length=1)


class IdentityClaims(Payload):
    sub: str = Field(min_length=1, max_length=64)
    email: Optional[str] = Field(None, max_length=255)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    profile_image_url: Optional[str] = Field(None, max_length=500)


class ProfileUpdate(Payload):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    profile_image_url: Optional[str] = Field(None, max_length=500)


# --- Categories ---

class CategoryCreate(Payload):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, pattern=COLOR_PATTERN)
    is_active: bool = True


# --- Listings ---

class ListingCreate(Payload):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=2000)
    category_id: int = Field(ge=1, le=MAX_DB_INT)
    price: Optional[Decimal] = Field(
        None, ge=0, max_digits=10, decimal_places=2)
    price_type: PriceTypeValue
    location: Optional[str] = Field(None, max_length=200)
    condition: Optional[ConditionValue] = None
    brand: Optional[str] = Field(None, max_length=100)
    quantity: int = Field(1, ge=1, le=MAX_DB_INT)
    # URIs of images already held in object storage
    images: List[str] = Field(default_factory=list, max_length=5)

    @field_validator('title')
    @classmethod
    def escape_title(cls, value):
        return _escaped_title(value)

    @field_validator('description')
    @classmethod
    def clean_description(cls, value):
        return sanitize_html(value)


class ListingUpdate(Payload):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    category_id: Optional[int] = Field(None, ge=1, le=MAX_DB_INT)
    price: Optional[Decimal] = Field(
        None, ge=0, max_digits=10, decimal_places=2)
    price_type: Optional[PriceTypeValue] = None
    location: Optional[str] = Field(None, max_length=200)
    condition: Optional[ConditionValue] = None
    brand: Optional[str] = Field(None, max_length=100)
    quantity: Optional[int] = Field(None, ge=1, le=MAX_DB_INT)
    images: Optional[List[str]] = Field(None, max_length=5)
    # Free-form: no vocabulary is enforced for status values
    status: Optional[str] = Field(None, min_length=1, max_length=20)
    is_promoted: Optional[bool] = None
    is_featured: Optional[bool] = None

    @field_validator('title')
    @classmethod
    def escape_title(cls, value):
        return _escaped_title(value)

    @field_validator('description')
    @classmethod
    def clean_description(cls, value):
        return sanitize_html(value)


class StatusUpdate(Payload):
    status: str = Field(min_length=1, max_length=20)


# --- Messages / reports ---

class MessageCreate(Payload):
    content: str = Field(min_length=1, max_length=1000)
    receiver_id: str = Field(min_length=1, max_length=50)
    listing_id: Optional[int] = Field(None, ge=1, le=MAX_DB_INT)

    @field_validator('content')
    @classmethod
    def clean_content(cls, value):
        return sanitize_html(value)


class ReportCreate(Payload):
    reason: str = Field(min_length=1, max_length=500)
    description: Optional[str] = Field(None, max_length=1000)
    listing_id: Optional[int] = Field(None, ge=1, le=MAX_DB_INT)
    reported_user_id: Optional[str] = Field(
        None, min_length=1, max_length=50)

    @field_validator('description')
    @classmethod
    def clean_description(cls, value):
        return sanitize_html(value)


# --- Community ---

class CommentCreate(Payload):
    content: str = Field(min_length=1, max_length=2000)
    listing_id: Optional[int] = Field(None, ge=1, le=MAX_DB_INT)
    forum_post_id: Optional[int] = Field(None, ge=1, le=MAX_DB_INT)
    parent_id: Optional[int] = Field(None, ge=1, le=MAX_DB_INT)

    @field_validator('content')
    @classmethod
    def clean_content(cls, value):
        return sanitize_html(value)

    @model_validator(mode='after')
    def check_target(self):
        if self.listing_id is None and self.forum_post_id is None:
            raise ValueError(
                'A comment needs either listingId or forumPostId')
        return self


class CommentUpdate(Payload):
    content: str = Field(min_length=1, max_length=2000)

    @field_validator('content')
    @classmethod
    def clean_content(cls, value):
        return sanitize_html(value)


class ForumPostCreate(Payload):
    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1, max_length=10000)
    category_id: Optional[int] = Field(None, ge=1, le=MAX_DB_INT)
    product_rating: Optional[int] = Field(None, ge=1, le=5)
    product_image: Optional[str] = Field(None, max_length=500)

    @field_validator('title')
    @classmethod
    def escape_title(cls, value):
        return _escaped_title(value, max_length=300)

    @field_validator('content')
    @classmethod
    def clean_content(cls, value):
        return sanitize_html(value)


class ForumPostUpdate(Payload):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    content: Optional[str] = Field(None, min_length=1, max_length=10000)
    category_id: Optional[int] = Field(None, ge=1, le=MAX_DB_INT)
    product_rating: Optional[int] = Field(None, ge=1, le=5)
    product_image: Optional[str] = Field(None, max_length=500)
    is_pinned: Optional[bool] = None
    is_locked: Optional[bool] = None

    @field_validator('title')
    @classmethod
    def escape_title(cls, value):
        return _escaped_title(value, max_length=300)

    @field_validator('content')
    @classmethod
    def clean_content(cls, value):
        return sanitize_html(value)


class ReviewCreate(Payload):
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)
    reviewed_user_id: Optional[str] = Field(
        None, min_length=1, max_length=64)
    listing_id: Optional[int] = Field(None, ge=1, le=MAX_DB_INT)

    @field_validator('comment')
    @classmethod
    def clean_comment(cls, value):
        return sanitize_html(value)


class ReviewUpdate(Payload):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)

    @field_validator('comment')
    @classmethod
    def clean_comment(cls, value):
        return sanitize_html(value)


# --- Cart / wishlist ---

class CartAdd(Payload):
    listing_id: int = Field(ge=1, le=MAX_DB_INT)
    quantity: int = Field(1, ge=1, le=MAX_DB_INT)


class CartUpdate(Payload):
    quantity: int = Field(ge=1, le=MAX_DB_INT)


class WishlistToggle(Payload):
    listing_id: int = Field(ge=1, le=MAX_DB_INT)
