from flask import Blueprint, jsonify, current_app, send_from_directory

bp = Blueprint('public', __name__)


@bp.route('/uploads/<path:filename>', methods=['GET'])
def uploaded_file(filename):
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)


@bp.route('/api/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok'})
