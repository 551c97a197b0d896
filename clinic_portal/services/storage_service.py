"""
Object storage for medical report attachments.

Files live under STORAGE_ROOT/<bucket>/<folder>/; rows keep only the public
URL returned by public_url().
"""
import os
import time
import secrets
import logging

from flask import current_app
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


def file_extension(filename):
    """Lower-case extension without the dot, '' when there is none"""
    name = secure_filename(filename or '')
    if '.' not in name:
        return ''
    return name.rsplit('.', 1)[1].lower()


def allowed_file(filename):
    return file_extension(filename) in current_app.config['ALLOWED_REPORT_EXTENSIONS']


def bucket_path(bucket=None):
    bucket = bucket or current_app.config['STORAGE_BUCKET']
    return os.path.join(current_app.config['STORAGE_ROOT'], bucket)


def upload(file_storage, folder='reports', bucket=None):
    """
    Save an uploaded file under a generated name.

    Args:
        file_storage: werkzeug FileStorage from request.files
        folder: sub-folder inside the bucket
        bucket: bucket name (defaults to STORAGE_BUCKET)

    Returns:
        Object path relative to the bucket, e.g. "reports/1718000000000-9f86d081.pdf"
    """
    ext = file_extension(file_storage.filename)
    if not ext:
        raise StorageError('File has no extension')

    object_name = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}.{ext}"
    object_path = f"{folder}/{object_name}"
    target_dir = os.path.join(bucket_path(bucket), folder)

    try:
        os.makedirs(target_dir, exist_ok=True, mode=0o755)
        file_storage.save(os.path.join(target_dir, object_name))
    except OSError as e:
        logger.error(f"Failed to store {object_path}: {e}", exc_info=True)
        raise StorageError(str(e))

    logger.info(f"Stored object {object_path}")
    return object_path


def public_url(object_path, bucket=None):
    """Browser-linkable URL for a stored object."""
    bucket = bucket or current_app.config['STORAGE_BUCKET']
    web_path = f"/storage/{bucket}/{object_path.lstrip('/')}"
    base = current_app.config.get('PUBLIC_BASE_URL')
    if base:
        return f"{base.rstrip('/')}{web_path}"
    return web_path

