"""
Logging Configuration
Centralized logging setup for the STK Push gateway
"""

import logging
import os
import signal
import sys
import threading
from logging.handlers import RotatingFileHandler

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger; handlers live on the root logger set up by configure_logging
    """
    return logging.getLogger(name)


def configure_logging(level='INFO', log_dir=None):
    """
    Attach console and optional rotating file handlers to the root logger

    Args:
        level: Log level name
        log_dir: Directory for stk-gateway.log; file logging is skipped when None
    """
    root = logging.getLogger()
    try:
        root.setLevel(level.upper() if isinstance(level, str) else level)
    except (TypeError, ValueError):
        root.setLevel(logging.INFO)
        root.warning(f'Unknown log level {level!r}; using INFO')

    # Only configure if not already configured
    if getattr(root, '_stkpush_configured', False):
        return root

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter('%(levelname)s - %(name)s - %(message)s'))
    root.addHandler(console_handler)

    if log_dir:
        try:
            os.makedirs(log_dir, exist_ok=True)
        except OSError as e:
            root.warning(f'Could not create log directory {log_dir}: {e}')
        else:
            file_handler = RotatingFileHandler(
                os.path.join(log_dir, 'stk-gateway.log'),
                maxBytes=10485760,  # 10MB
                backupCount=10
            )
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
            root.addHandler(file_handler)

    root._stkpush_configured = True
    return root


class RequestLogger:
    """Middleware to log all requests"""

    def __init__(self, app=None):
        self.app = app
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Initialize request logging"""

        @app.before_request
        def log_request():
            from flask import request
            logger = get_logger('request')
            logger.info(f'{request.method} {request.path} - IP: {request.remote_addr}')

        @app.after_request
        def log_response(response):
            from flask import request
            logger = get_logger('response')
            logger.info(f'{request.method} {request.path} - Status: {response.status_code}')
            return response


def install_process_handlers():
    """
    Log uncaught exceptions from the main thread and worker threads.

    Safe to call from any thread, so the application factory installs it
    for every entry point (flask run, WSGI servers, app.py).
    """
    logger = get_logger('process')

    def handle_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.error('Uncaught exception: %s', exc_value,
                     exc_info=(exc_type, exc_value, exc_traceback))

    def handle_thread_exception(args):
        logger.error('Uncaught exception in thread %s: %s',
                     args.thread.name if args.thread else 'unknown', args.exc_value,
                     exc_info=(args.exc_type, args.exc_value, args.exc_traceback))

    sys.excepthook = handle_exception
    threading.excepthook = handle_thread_exception


def install_signal_handlers():
    """
    Log SIGTERM / SIGINT before exiting cleanly.

    signal.signal only works from the main thread, and WSGI servers such as
    gunicorn manage worker signals themselves, so only app.py calls this.
    """
    logger = get_logger('process')

    def handle_shutdown(signum, frame):
        logger.info(f'{signal.Signals(signum).name} received, shutting down gracefully')
        sys.exit(0)

    signal.signal(signal.SIGTERM, handle_shutdown)
    signal.signal(signal.SIGINT, handle_shutdown)
    return handle_shutdown
