"""
Utils Package
Utility functions and helpers
"""

from stkpush.utils.logger import (
    get_logger,
    configure_logging,
    RequestLogger,
    install_process_handlers,
    install_signal_handlers
)
from stkpush.utils.validators import (
    normalize_phone_number,
    validate_amount,
    sanitize_text
)

__all__ = [
    'get_logger',
    'configure_logging',
    'RequestLogger',
    'install_process_handlers',
    'install_signal_handlers',
    'normalize_phone_number',
    'validate_amount',
    'sanitize_text'
]
