"""
Serves stored report files at the URLs produced by storage_service.public_url
"""
from flask import Blueprint, current_app, send_from_directory, abort
from clinic_portal.services.storage_service import bucket_path

storage_bp = Blueprint('storage', __name__, url_prefix='/storage')


@storage_bp.route('/<bucket>/<path:filename>', methods=['GET'])
def get_object(bucket, filename):
    """Public read of a stored object; unknown buckets are 404"""
    if bucket != current_app.config['STORAGE_BUCKET']:
        abort(404)
    # send_from_directory rejects paths escaping the bucket directory
    return send_from_directory(bucket_path(bucket), filename)
