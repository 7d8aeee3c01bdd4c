from flask import jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
from terranav.extensions import db
import logging

logger = logging.getLogger(__name__)


class APIError(Exception):
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None, errors=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.errors = errors

    def to_dict(self):
        body = {'message': self.message}
        if self.errors:
            body['errors'] = self.errors
        return body


class ValidationError(APIError):
    """Request data failed validation; ``errors`` holds field details."""

    status_code = 400
    message = 'Validation failed'

    @classmethod
    def for_field(cls, field, message):
        return cls(errors=[{'field': field, 'message': message}])


class AuthorizationError(APIError):
    status_code = 403
    message = 'Not authorized'


class NotFoundError(APIError):
    status_code = 404
    message = 'Not found'


def register_error_handlers(app):

    @app.errorhandler(APIError)
    def handle_api_error(error):
        if error.status_code >= 500:
            db.session.rollback()
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        return jsonify({
            'message': 'Validation failed',
            'errors': [{
                'field': 'images',
                'message': 'Upload exceeds the maximum allowed size',
            }],
        }), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        logger.exception("Unhandled error: %s", error)
        return jsonify({'message': 'Internal server error'}), 500
