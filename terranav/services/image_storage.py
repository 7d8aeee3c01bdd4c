import os
import uuid

from flask import current_app
from werkzeug.utils import secure_filename

from terranav.errors import ValidationError

ALLOWED_MIMETYPES = ('image/jpeg', 'image/png', 'image/gif', 'image/webp')

URL_PREFIX = '/uploads'


def _file_size(file_storage) -> int:
    stream = file_storage.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def _validate_image(file_storage):
    original = file_storage.filename or ''
    filename = secure_filename(original)
    ext = (filename.rsplit('.', 1)[-1] if '.' in filename else '').lower()
    allowed = current_app.config['ALLOWED_IMAGE_EXTENSIONS']
    if (
        ext not in allowed
        or file_storage.mimetype not in ALLOWED_MIMETYPES
        or len(original) >= 255
    ):
        raise ValidationError.for_field(
            'images',
            'Only image files (jpg, png, gif, webp) under 255 characters '
            'are allowed')

    if _file_size(file_storage) > current_app.config['MAX_IMAGE_SIZE']:
        raise ValidationError.for_field(
            'images', f'{original} exceeds the 5MB size limit')
    return ext


def save_listing_images(files) -> list:
    """Store uploaded listing images and return their public paths.

    Files already written stay on disk if a later step fails.
    """
    files = [f for f in files if f and f.filename]
    if not files:
        return []

    if len(files) > current_app.config['MAX_UPLOAD_FILES']:
        raise ValidationError.for_field(
            'images',
            f"At most {current_app.config['MAX_UPLOAD_FILES']} images "
            f"are allowed")

    # Validate everything before writing anything
    extensions = [_validate_image(f) for f in files]

    upload_dir = current_app.config['UPLOAD_FOLDER']
    os.makedirs(upload_dir, exist_ok=True)

    paths = []
    for file_storage, ext in zip(files, extensions):
        new_name = f"images-{uuid.uuid4().hex}.{ext}"
        file_storage.save(os.path.join(upload_dir, new_name))
        paths.append(f"{URL_PREFIX}/{new_name}")
    return paths
