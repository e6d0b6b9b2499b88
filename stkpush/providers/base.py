from abc import ABC, abstractmethod
from typing import Dict, Any


class PaymentProvider(ABC):
    """Abstract base class for payment providers"""

    def __init__(self, config):
        """
        Initialize provider with configuration

        Args:
            config: Provider-specific configuration
        """
        self.config = config
        self.provider_name = self.__class__.__name__.replace('Provider', '').lower()

    @abstractmethod
    def initialize_payment(
            self,
            amount: float,
            phone_number: str,
            account_reference: str,
            transaction_desc: str
    ) -> Dict[str, Any]:
        """
        Ask the provider to push a payment prompt to the customer's handset

        Args:
            amount: Payment amount
            phone_number: Normalized subscriber number
            account_reference: Reference shown to the customer
            transaction_desc: Description shown to the customer

        Returns:
            The provider's response body, unmodified
        """
        pass

    @abstractmethod
    def handle_webhook(self, payload: Any) -> Dict[str, Any]:
        """
        Acknowledge a provider callback

        Args:
            payload: Parsed callback body (may be anything, including None)

        Returns:
            Dict containing:
                - success: Whether the payload looked well formed
                - message: Human readable outcome
        """
        pass

    def get_provider_name(self) -> str:
        """Get provider name"""
        return self.provider_name


class PaymentProviderError(Exception):
    """Base exception for provider errors"""
    pass


class AuthenticationError(PaymentProviderError):
    """Raised when the provider refuses or fails to issue an access token"""
    pass


class PaymentInitializationError(PaymentProviderError):
    """Raised when payment initialization fails"""
    pass
