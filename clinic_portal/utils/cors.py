"""
CORS for the browser front end. API calls authenticate with a bearer
token, so no cookies are shared cross-origin.
"""
from flask_cors import CORS


def allowed_origins(value):
    """'*' or a comma-separated list from CORS_ORIGINS"""
    value = (value or '*').strip()
    if value == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def init_cors(app):
    origins = allowed_origins(app.config.get('CORS_ORIGINS'))
    CORS(
        app,
        resources={
            r"/api/*": {"origins": origins},
            r"/storage/*": {"origins": origins, "methods": ["GET"]},
        },
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=86400,
    )
    app.logger.info("CORS enabled for origins: %s", origins)
