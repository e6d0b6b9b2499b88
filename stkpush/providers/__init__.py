from flask import current_app

from stkpush.providers.base import (
    PaymentProvider,
    PaymentProviderError,
    AuthenticationError,
    PaymentInitializationError,
)
from stkpush.providers.mpesa_provider import MPesaProvider
from stkpush.providers.token_cache import TokenCache

__all__ = [
    'PaymentProvider',
    'PaymentProviderError',
    'AuthenticationError',
    'PaymentInitializationError',
    'MPesaProvider',
    'TokenCache',
    'get_provider',
]


def get_provider() -> PaymentProvider:
    """
    Get the provider bound to the current application.

    Returns:
        The provider instance registered by create_app

    Raises:
        RuntimeError: If the application was created without one
    """
    provider = current_app.extensions.get('mpesa')
    if provider is None:
        raise RuntimeError('M-Pesa provider is not initialised for this application')
    return provider
