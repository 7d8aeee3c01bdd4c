import pytest

from terranav import create_app
from terranav.config import TestConfig
from terranav.extensions import db
from terranav.models import Category, Listing, User
from terranav.services.identity_service import issue_identity_token


@pytest.fixture
def app(tmp_path):
    app = create_app(TestConfig)
    app.config['UPLOAD_FOLDER'] = str(tmp_path / 'uploads')

    # Requests must not share an app context with the test body
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Create a user and return bearer headers for it."""

    def _make_user(user_id, is_admin=False, **fields):
        with app.app_context():
            user = User(
                id=user_id,
                email=fields.pop('email', f'{user_id}@example.com'),
                first_name=fields.pop('first_name', user_id.title()),
                is_admin=is_admin,
                **fields,
            )
            db.session.add(user)
            db.session.commit()
            token = issue_identity_token({'sub': user_id})
        return {'Authorization': f'Bearer {token}'}

    return _make_user


@pytest.fixture
def make_category(app):

    def _make_category(name='Housing', slug=None, **fields):
        with app.app_context():
            category = Category(
                name=name,
                slug=slug or name.lower().replace(' ', '-'),
                is_active=True,
                **fields,
            )
            db.session.add(category)
            db.session.commit()
            return category.id

    return _make_category


@pytest.fixture
def make_listing(app):
    """Insert a listing row directly and return its id."""

    def _make_listing(user_id, category_id, **fields):
        fields.setdefault('title', 'Listing')
        fields.setdefault('description', 'Something useful')
        fields.setdefault('price_type', 'fixed')
        with app.app_context():
            listing = Listing(
                user_id=user_id,
                category_id=category_id,
                images=fields.pop('images', []),
                **fields,
            )
            db.session.add(listing)
            db.session.commit()
            return listing.id

    return _make_listing
