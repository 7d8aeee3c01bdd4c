from flask import Flask, jsonify
from flask_migrate import Migrate
from flask_login import LoginManager
from terranav.extensions import db
from terranav.config import Config
from terranav.errors import register_error_handlers
from terranav.middleware import setup_auth_middleware
import logging

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

migrate = Migrate()
login_manager = LoginManager()


def configure_logging(app):
    handlers = [logging.StreamHandler()]
    if app.config.get('LOG_FILE'):
        handlers.append(logging.FileHandler(app.config['LOG_FILE']))

    # No-op when the root logger is already configured
    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    from terranav.models import User
    from terranav.services.identity_service import verify_identity_token

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, user_id)

    @login_manager.request_loader
    def load_user_from_request(request):
        header = request.headers.get('Authorization', '')
        if not header.startswith('Bearer '):
            return None
        claims = verify_identity_token(header[len('Bearer '):].strip())
        if claims is None:
            return None
        return db.session.get(User, claims['sub'])

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'message': 'Unauthorized'}), 401

    # Path ids share the column range of the integer primary keys
    from terranav.utils import DatabaseIdConverter
    app.url_map.converters['int'] = DatabaseIdConverter

    # Register blueprints
    from terranav.blueprints import (
        admin,
        auth,
        cart,
        categories,
        comments,
        forum,
        listings,
        messages,
        public,
        reports,
        reviews,
    )

    # All blueprints use absolute routes.
    app.register_blueprint(auth.bp, url_prefix='/')
    app.register_blueprint(public.bp, url_prefix='/')
    app.register_blueprint(categories.bp, url_prefix='/')
    app.register_blueprint(listings.bp, url_prefix='/')
    app.register_blueprint(messages.bp, url_prefix='/')
    app.register_blueprint(reports.bp, url_prefix='/')
    app.register_blueprint(comments.bp, url_prefix='/')
    app.register_blueprint(forum.bp, url_prefix='/')
    app.register_blueprint(reviews.bp, url_prefix='/')
    app.register_blueprint(cart.bp, url_prefix='/')
    app.register_blueprint(admin.bp, url_prefix='/')

    # Builds the request principal and guards the private API
    setup_auth_middleware(app)
    register_error_handlers(app)

    # Note: Database tables are managed via Flask-Migrate
    # Use 'flask db upgrade' to create/update tables

    logger.info("Flask application initialized")
    return app
