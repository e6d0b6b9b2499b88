import os

from stkpush import create_app
from stkpush.utils.logger import get_logger, install_signal_handlers

app = create_app(os.getenv('FLASK_ENV', 'development'))

if __name__ == '__main__':
    install_signal_handlers()

    logger = get_logger(__name__)
    port = app.config['PORT']
    logger.info(f'Server running on port {port}')
    logger.info(f"M-Pesa Environment: {app.config.get('MPESA_ENV') or 'unknown'}")
    logger.info(f'Health check: http://localhost:{port}/health')

    app.run(debug=app.config.get('DEBUG', False), host='0.0.0.0', port=port)
