from stkpush.config import MpesaConfig
from stkpush.providers.mpesa_provider import MPesaProvider
from stkpush.utils.logger import get_logger

logger = get_logger(__name__)


class MpesaExtension:
    """Owns the app's Daraja config and provider (and with it the token cache)."""

    def __init__(self):
        self.config = None
        self.provider = None

    def init_app(self, app, provider=None):
        self.config = MpesaConfig.from_mapping(app.config)

        # Degraded mode: report problems but keep serving
        errors = self.config.validate()
        if errors:
            logger.error('Environment validation errors detected:')
            for error in errors:
                logger.error(f'   - {error}')
            logger.warning('Server starting with configuration issues. Some features may not work.')
        else:
            logger.info('Environment validation passed')

        self.provider = provider or MPesaProvider(self.config)
        app.extensions['mpesa'] = self.provider
        return errors


mpesa = MpesaExtension()
