"""
Health Check Endpoint
"""

from datetime import datetime, timezone

from flask import Blueprint, jsonify, current_app

from stkpush import __version__

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Basic health check endpoint

    Returns:
        200 with status, timestamp, M-Pesa environment and version
    """
    return jsonify({
        'status': 'OK',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'environment': current_app.config.get('MPESA_ENV') or 'unknown',
        'version': __version__
    }), 200
