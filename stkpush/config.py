import logging
import os
from dataclasses import dataclass
from typing import Any, List, Mapping, Tuple
from urllib.parse import urlparse

from dotenv import load_dotenv

load_dotenv()

# Problems met while parsing typed settings; reported with the other
# startup validation errors instead of aborting the import
ENV_ERRORS = []


def _split_origins(value):
    if not value:
        return []
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def _env_number(name, default, cast=float, minimum=1):
    """Read a numeric setting, falling back to default when it is malformed."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        value = None
    # NaN fails the comparison too
    if value is None or not value >= minimum:
        ENV_ERRORS.append(f'{name} must be a number >= {minimum}, got {raw!r}; using {default}')
        return default
    return value


def _env_log_level(name, default='INFO'):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    level = raw.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        ENV_ERRORS.append(f'{name} must be a logging level name, got {raw!r}; using {default}')
        return default
    return level


class Config:
    """Base configuration"""
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key')
    PORT = _env_number('PORT', 3000, cast=int)

    # Reject oversized request bodies
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

    LOG_LEVEL = _env_log_level('LOG_LEVEL')
    LOG_DIR = os.getenv('LOG_DIR')

    # Install sys/threading exception hooks in create_app
    PROCESS_HOOKS = True

    # Comma-separated CORS allowlist; CORS stays off when empty
    FRONTEND_ORIGINS = _split_origins(os.getenv('FRONTEND_ORIGINS'))

    # M-Pesa (Daraja) Configuration
    MPESA_CONSUMER_KEY = os.getenv('MPESA_CONSUMER_KEY')
    MPESA_CONSUMER_SECRET = os.getenv('MPESA_CONSUMER_SECRET')
    MPESA_SHORTCODE = os.getenv('MPESA_SHORTCODE')
    MPESA_PASSKEY = os.getenv('MPESA_PASSKEY')
    MPESA_CALLBACK_URL = os.getenv('MPESA_CALLBACK_URL')
    MPESA_ENV = os.getenv('MPESA_ENV')

    MPESA_AUTH_TIMEOUT = _env_number('MPESA_AUTH_TIMEOUT', 10)
    MPESA_REQUEST_TIMEOUT = _env_number('MPESA_REQUEST_TIMEOUT', 30)
    MPESA_TOKEN_SAFETY_MARGIN = _env_number('MPESA_TOKEN_SAFETY_MARGIN', 300, cast=int, minimum=0)

    CONFIG_ERRORS = tuple(ENV_ERRORS)


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    LOG_DIR = None
    PROCESS_HOOKS = False
    FRONTEND_ORIGINS = []

    MPESA_CONSUMER_KEY = 'test_consumer_key'
    MPESA_CONSUMER_SECRET = 'test_consumer_secret'
    MPESA_SHORTCODE = '174379'
    MPESA_PASSKEY = 'test_passkey'
    MPESA_CALLBACK_URL = 'https://example.com/api/mpesa/callback'
    MPESA_ENV = 'sandbox'


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


# Daraja base URLs
BASE_URLS = {
    'sandbox':    'https://sandbox.safaricom.co.ke',
    'production': 'https://api.safaricom.co.ke',
}

REQUIRED_SETTINGS = (
    'MPESA_CONSUMER_KEY',
    'MPESA_CONSUMER_SECRET',
    'MPESA_SHORTCODE',
    'MPESA_PASSKEY',
    'MPESA_CALLBACK_URL',
    'MPESA_ENV',
)


@dataclass(frozen=True)
class MpesaConfig:
    """
    Daraja settings resolved once at startup and handed to the provider.

    Built from the Flask config mapping so the provider never reads
    environment variables itself.
    """
    consumer_key: str = ''
    consumer_secret: str = ''
    shortcode: str = ''
    passkey: str = ''
    callback_url: str = ''
    environment: str = ''
    auth_timeout: float = 10
    request_timeout: float = 30
    token_safety_margin: int = 300
    env_errors: Tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> 'MpesaConfig':
        return cls(
            consumer_key=settings.get('MPESA_CONSUMER_KEY') or '',
            consumer_secret=settings.get('MPESA_CONSUMER_SECRET') or '',
            shortcode=str(settings.get('MPESA_SHORTCODE') or ''),
            passkey=settings.get('MPESA_PASSKEY') or '',
            callback_url=settings.get('MPESA_CALLBACK_URL') or '',
            environment=settings.get('MPESA_ENV') or '',
            auth_timeout=settings.get('MPESA_AUTH_TIMEOUT', 10),
            request_timeout=settings.get('MPESA_REQUEST_TIMEOUT', 30),
            token_safety_margin=settings.get('MPESA_TOKEN_SAFETY_MARGIN', 300),
            env_errors=tuple(settings.get('CONFIG_ERRORS') or ()),
        )

    @property
    def base_url(self) -> str:
        # Anything other than an explicit production flag talks to the sandbox
        if self.environment == 'production':
            return BASE_URLS['production']
        return BASE_URLS['sandbox']

    @property
    def is_sandbox(self) -> bool:
        return self.environment == 'sandbox'

    def validate(self) -> List[str]:
        """
        Check presence and basic shape of the Daraja settings.

        Returns:
            List of human readable problems; empty when the config is usable
        """
        errors = list(self.env_errors)

        values = {
            'MPESA_CONSUMER_KEY': self.consumer_key,
            'MPESA_CONSUMER_SECRET': self.consumer_secret,
            'MPESA_SHORTCODE': self.shortcode,
            'MPESA_PASSKEY': self.passkey,
            'MPESA_CALLBACK_URL': self.callback_url,
            'MPESA_ENV': self.environment,
        }
        for name in REQUIRED_SETTINGS:
            if not values[name]:
                errors.append(f'Missing required environment variable: {name}')

        if self.environment and self.environment not in BASE_URLS:
            errors.append('MPESA_ENV must be either "sandbox" or "production"')

        if self.callback_url:
            parsed = urlparse(self.callback_url)
            if not parsed.scheme or not parsed.netloc:
                errors.append('MPESA_CALLBACK_URL must be a valid URL')
            elif parsed.scheme != 'https' and self.environment == 'production':
                errors.append('MPESA_CALLBACK_URL must use HTTPS in production environment')

        return errors
