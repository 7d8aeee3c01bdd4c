import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or (
        'dev-secret-key-change-in-production'
    )
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or (
        'sqlite:///terranav.db'
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Tokens are issued by the external identity provider.
    # Falls back to SECRET_KEY when no dedicated secret is set.
    IDENTITY_TOKEN_SECRET = (
        os.environ.get('IDENTITY_TOKEN_SECRET') or SECRET_KEY
    )
    IDENTITY_TOKEN_MAX_AGE = int(
        os.environ.get('IDENTITY_TOKEN_MAX_AGE', 24 * 60 * 60)
    )

    # Listing image uploads
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.abspath(
        'uploads'
    )
    MAX_UPLOAD_FILES = 5
    MAX_IMAGE_SIZE = 5 * 1024 * 1024
    ALLOWED_IMAGE_EXTENSIONS = ('jpg', 'jpeg', 'png', 'gif', 'webp')
    MAX_CONTENT_LENGTH = MAX_UPLOAD_FILES * MAX_IMAGE_SIZE + 1024 * 1024

    # Pagination configuration
    LISTINGS_PER_PAGE = 20

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FILE = os.environ.get('LOG_FILE', 'terranav.log')


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    IDENTITY_TOKEN_SECRET = 'test-identity-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    LOG_FILE = None
