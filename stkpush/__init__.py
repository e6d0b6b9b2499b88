import os

from flask import Flask
from flask_cors import CORS

__version__ = '1.0.0'


def create_app(config_name=None, provider=None):
    """
    Application factory pattern

    Args:
        config_name: Key into stkpush.config.config; defaults to FLASK_ENV
        provider: Optional payment provider to use instead of building
            MPesaProvider from the configuration (used by tests)
    """
    from stkpush.config import config
    from stkpush.extensions import mpesa
    from stkpush.utils.logger import configure_logging, install_process_handlers, RequestLogger

    config_name = config_name or os.getenv('FLASK_ENV', 'default')

    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config.get(config_name, config['default']))

    configure_logging(app.config['LOG_LEVEL'], app.config['LOG_DIR'])
    if app.config.get('PROCESS_HOOKS'):
        install_process_handlers()
    RequestLogger(app)

    # Initialize extensions
    mpesa.init_app(app, provider=provider)

    origins = app.config.get('FRONTEND_ORIGINS')
    if origins:
        CORS(app, resources={r'/api/*': {'origins': origins}})

    # Register blueprints
    from stkpush.api import register_blueprints
    register_blueprints(app)

    # Error handlers
    register_error_handlers(app)

    return app


def register_error_handlers(app):
    """Register error handlers"""
    from datetime import datetime, timezone

    from flask import jsonify, request
    from werkzeug.exceptions import HTTPException

    from stkpush.errors import AppError

    @app.errorhandler(AppError)
    def app_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'error': 'Endpoint not found',
            'path': request.path,
            'method': request.method
        }), 404

    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({'error': error.name, 'message': error.description}), error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        app.logger.exception(f'Unhandled application error: {error}')
        return jsonify({
            'error': 'Internal server error',
            'timestamp': datetime.now(timezone.utc).isoformat()
        }), 500
