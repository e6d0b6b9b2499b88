"""
API Blueprints Package
Registers all API blueprints
"""

from stkpush.api.health import health_bp
from stkpush.api.mpesa import mpesa_bp

# Export blueprints
__all__ = [
    'health_bp',
    'mpesa_bp',
    'register_blueprints'
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app

    Args:
        app: Flask application instance
    """
    app.register_blueprint(health_bp)
    app.register_blueprint(mpesa_bp, url_prefix='/api/mpesa')
