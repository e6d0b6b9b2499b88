"""
M-Pesa Payment Provider
Based on the Safaricom Daraja API.

Supported flows
---------------
STK Push (Lipa na M-Pesa Online)
    POST /mpesa/stkpush/v1/processrequest

Authentication
    GET  /oauth/v1/generate?grant_type=client_credentials  (Basic auth)
    Tokens are cached in a TokenCache owned by the provider and refreshed
    a fixed safety margin before Daraja says they expire.

Callback
    Safaricom POSTs the STK result to CallBackURL. The payload is only
    acknowledged; it is not stored or verified.

Required config (MpesaConfig)
-----------------------------
    consumer_key        – From Safaricom Developer Portal app
    consumer_secret     – From Safaricom Developer Portal app
    shortcode           – Business shortcode (PayBill)
    passkey             – Lipa na M-Pesa Online passkey
    callback_url        – Publicly reachable callback endpoint
    environment         – "sandbox" | "production"
"""

import base64
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import requests

from stkpush.config import MpesaConfig
from stkpush.providers.base import (
    PaymentProvider,
    PaymentProviderError,
    AuthenticationError,
    PaymentInitializationError,
)
from stkpush.providers.token_cache import TokenCache

logger = logging.getLogger(__name__)


class MPesaProvider(PaymentProvider):
    """M-Pesa (Daraja API) payment provider adapter."""

    # Daraja endpoint paths
    _EP_AUTH     = "/oauth/v1/generate"
    _EP_STK_PUSH = "/mpesa/stkpush/v1/processrequest"

    TRANSACTION_TYPE = "CustomerPayBillOnline"

    def __init__(
        self,
        config: MpesaConfig,
        token_cache: Optional[TokenCache] = None,
        session: Optional[requests.Session] = None,
    ):
        super().__init__(config)

        self.base_url = config.base_url
        self.token_cache = token_cache or TokenCache(safety_margin=config.token_safety_margin)

        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    # PaymentProvider ABC

    def initialize_payment(
        self,
        amount: float,
        phone_number: str,
        account_reference: str,
        transaction_desc: str,
    ) -> Dict[str, Any]:
        """
        Send an STK Push prompt to the customer's handset.

        phone_number must already be normalised (254XXXXXXXXX).

        Returns the Daraja response body as-is, e.g.
            MerchantRequestID, CheckoutRequestID, ResponseCode,
            ResponseDescription, CustomerMessage

        Raises PaymentInitializationError on any failure, including
        failure to authenticate.
        """
        try:
            token = self.get_access_token()
            timestamp, password = self._generate_password()

            payload = {
                "BusinessShortCode": self.config.shortcode,
                "Password":          password,
                "Timestamp":         timestamp,
                "TransactionType":   self.TRANSACTION_TYPE,
                "Amount":            amount,
                "PartyA":            phone_number,
                "PartyB":            self.config.shortcode,
                "PhoneNumber":       phone_number,
                "CallBackURL":       self.config.callback_url,
                "AccountReference":  account_reference,
                "TransactionDesc":   transaction_desc,
            }

            resp = self._session.post(
                f"{self.base_url}{self._EP_STK_PUSH}",
                json=payload,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.config.request_timeout,
            )
            resp.raise_for_status()
            body = resp.json()
            if not isinstance(body, dict):
                raise ValueError(f"Unexpected STK Push response: {type(body).__name__}")
            return body
        except (PaymentProviderError, requests.RequestException, ValueError) as exc:
            logger.error("STK Push request failed: %s", exc)
            raise PaymentInitializationError("Failed to initiate STK Push transaction") from exc

    def handle_webhook(self, payload: Any) -> Dict[str, Any]:
        """
        Acknowledge an STK Push callback.

        Nothing is parsed or stored. The payload is logged in the sandbox
        only, since production callbacks carry customer details.
        """
        try:
            if self.config.is_sandbox:
                logger.info(
                    "M-Pesa callback received: %s",
                    json.dumps(payload, indent=2, default=str),
                )

            if not isinstance(payload, dict):
                return {"success": False, "message": "Invalid callback data structure"}

            return {"success": True, "message": "Callback processed successfully"}
        except Exception as exc:
            logger.error("Error processing M-Pesa callback: %s", exc)
            return {"success": False, "message": "Callback processing failed"}

    # Auth & HTTP helpers

    def get_access_token(self) -> str:
        """Return a valid OAuth access token, refreshing if expired."""
        token = self.token_cache.get()
        if token:
            return token

        with self.token_cache.lock:
            # Another thread may have refreshed while we waited
            token = self.token_cache.get()
            if token:
                return token

            url = f"{self.base_url}{self._EP_AUTH}?grant_type=client_credentials"
            try:
                resp = self._session.get(
                    url,
                    auth=(self.config.consumer_key, self.config.consumer_secret),
                    timeout=self.config.auth_timeout,
                )
                resp.raise_for_status()
                data = resp.json()
                token = data["access_token"]
                expires_in = int(data.get("expires_in", 3600))
            except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
                # requests error messages carry the URL only, never the Basic auth header
                logger.error("Failed to retrieve M-Pesa access token: %s", exc)
                raise AuthenticationError("Unable to authenticate with M-Pesa API") from exc

            if not token:
                logger.error("Failed to retrieve M-Pesa access token: empty token in response")
                raise AuthenticationError("Unable to authenticate with M-Pesa API")

            self.token_cache.store(token, expires_in)
            logger.debug("MPesaProvider: access token refreshed (expires in %ds)", expires_in)
            return token

    def _generate_password(self, now: Optional[datetime] = None) -> Tuple[str, str]:
        """
        Generate the STK Push password and timestamp.

        Password = Base64(BusinessShortCode + Passkey + Timestamp)
        Timestamp = YYYYMMDDHHmmss in UTC
        """
        now = now or datetime.now(timezone.utc)
        timestamp = now.strftime("%Y%m%d%H%M%S")
        raw = f"{self.config.shortcode}{self.config.passkey}{timestamp}"
        password = base64.b64encode(raw.encode("utf-8")).decode("utf-8")
        return timestamp, password
