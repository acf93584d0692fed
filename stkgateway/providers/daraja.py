"""
Daraja API client
Based on the Safaricom Daraja API (v1).

Supported flows
---------------
Authentication
    GET  /oauth/v1/generate?grant_type=client_credentials  (Basic auth)

STK Push (Lipa na M-Pesa Online)
    POST /mpesa/stkpush/v1/processrequest                  (Bearer auth)

Callback
    Safaricom POSTs the STK result to CallBackURL, normally wrapped as
    {"Body": {"stkCallback": {...}}}. parse_stk_callback() also accepts the
    unwrapped callback object.

Required config keys
--------------------
    consumer_key        – From Safaricom Developer Portal app
    consumer_secret     – From Safaricom Developer Portal app
    shortcode           – Business shortcode (PayBill or Buy-Goods)
    passkey             – Lipa na M-Pesa Online passkey
    callback_url        – Publicly reachable callback endpoint
    environment         – "production" selects the live host, anything else the sandbox
"""

import base64
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

import requests

from stkgateway.errors import ConfigurationError
from stkgateway.providers.base import AccessTokenError, StkPushError
from stkgateway.utils.logger import get_logger
from stkgateway.utils.phone import normalize_phone, DEFAULT_COUNTRY_CODE

logger = get_logger(__name__)

# Daraja base URLs
_BASE_URLS = {
    "sandbox":    "https://sandbox.safaricom.co.ke",
    "production": "https://api.safaricom.co.ke",
}

DEFAULT_TOKEN_TTL = 3600
SUCCESS_RESULT_CODE = 0
MISSING_RESULT_CODE = -1


def resolve_base_url(environment: Optional[str]) -> str:
    if str(environment).lower() == "production":
        return _BASE_URLS["production"]
    return _BASE_URLS["sandbox"]


@dataclass
class StkCallback:
    """
    Decoded STK callback.

    shape is "nested" for Body.stkCallback payloads, "flat" for a bare
    callback object and "unknown" for anything that is not a JSON object.
    """
    shape: str
    checkout_request_id: Optional[str]
    result_code: Any
    result_desc: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    raw: Any = None

    @property
    def succeeded(self) -> bool:
        code = self.result_code
        return isinstance(code, int) and not isinstance(code, bool) and code == SUCCESS_RESULT_CODE


def _flatten_metadata(callback: Dict[str, Any]) -> Dict[str, Any]:
    container = callback.get("CallbackMetadata")
    items = container.get("Item") if isinstance(container, dict) else None
    if not isinstance(items, list):
        return {}

    meta: Dict[str, Any] = {}
    for item in items:
        if isinstance(item, dict) and item.get("Name"):
            meta[item["Name"]] = item.get("Value")
    return meta


def parse_stk_callback(payload: Any) -> StkCallback:
    """Decode an STK callback body, trying Body.stkCallback before the flat shape."""
    if not isinstance(payload, dict):
        logger.warning("Unrecognised callback payload type: %s", type(payload).__name__)
        return StkCallback(
            shape="unknown",
            checkout_request_id=None,
            result_code=MISSING_RESULT_CODE,
            raw=payload,
        )

    body = payload.get("Body")
    nested = body.get("stkCallback") if isinstance(body, dict) else None
    if isinstance(nested, dict):
        shape, callback = "nested", nested
    else:
        shape, callback = "flat", payload

    checkout_id = callback.get("CheckoutRequestID") or callback.get("checkoutRequestID")

    if callback.get("ResultCode") is not None:
        result_code = callback["ResultCode"]
    elif callback.get("resultCode") is not None:
        result_code = callback["resultCode"]
    else:
        result_code = MISSING_RESULT_CODE

    return StkCallback(
        shape=shape,
        checkout_request_id=checkout_id,
        result_code=result_code,
        result_desc=callback.get("ResultDesc") or callback.get("resultDesc"),
        metadata=_flatten_metadata(callback),
        raw=callback,
    )


class DarajaClient:
    """Thin client for the Daraja OAuth and STK push endpoints."""

    _EP_AUTH     = "/oauth/v1/generate"
    _EP_STK_PUSH = "/mpesa/stkpush/v1/processrequest"

    def __init__(self, config: Dict[str, Any]):
        self.consumer_key     = config.get("consumer_key") or ""
        self.consumer_secret  = config.get("consumer_secret") or ""
        self.shortcode        = str(config.get("shortcode") or "")
        self.passkey          = config.get("passkey") or ""
        self.callback_url     = config.get("callback_url") or ""
        self.environment      = str(config.get("environment") or "sandbox").lower()
        self.transaction_type = config.get("transaction_type", "CustomerPayBillOnline")
        self.transaction_desc = config.get("transaction_desc", "Payment")
        self.country_code     = str(config.get("country_code") or DEFAULT_COUNTRY_CODE)
        self.token_timeout    = config.get("token_timeout", 10)
        self.stk_push_timeout = config.get("stk_push_timeout", 15)

        self.base_url = resolve_base_url(self.environment)

        self._session = requests.Session()
        self._session.headers.update({
            "Content-Type": "application/json",
            "Accept":       "application/json",
        })

    # Authentication

    def fetch_access_token(self) -> Tuple[str, int]:
        """
        Request a new OAuth token.

        Returns:
            (access_token, expires_in_seconds)

        Raises:
            ConfigurationError: consumer key or secret missing (no request is made)
            AccessTokenError: network error, non-2xx, or no token in the response
        """
        if not self.consumer_key or not self.consumer_secret:
            raise ConfigurationError("Missing Daraja consumer credentials.")

        url = f"{self.base_url}{self._EP_AUTH}?grant_type=client_credentials"
        try:
            resp = requests.get(
                url,
                auth=(self.consumer_key, self.consumer_secret),
                headers={"Accept": "application/json"},
                timeout=self.token_timeout,
            )
        except requests.RequestException as exc:
            logger.error("Access token request failed: %s", exc)
            raise AccessTokenError(f"Access token request failed – {exc}", detail=str(exc)) from exc

        data = self._decode(resp)

        if not resp.ok:
            logger.error("Access token error response (HTTP %s): %s", resp.status_code, data)
            raise AccessTokenError(
                f"Access token request returned HTTP {resp.status_code}", detail=data
            )

        token = data.get("access_token") or data.get("accessToken")
        if not token:
            logger.error("No access_token in response: %s", data)
            raise AccessTokenError("No access_token returned by Daraja.", detail=data)

        expires_in = data.get("expires_in") or data.get("expiresIn") or DEFAULT_TOKEN_TTL
        try:
            expires_in = int(expires_in)
        except (TypeError, ValueError):
            expires_in = DEFAULT_TOKEN_TTL

        logger.debug("Daraja access token obtained (expires in %ds)", expires_in)
        return token, expires_in

    # STK Push

    def assert_stk_config(self) -> None:
        """Raise ConfigurationError if STK push settings are incomplete."""
        missing = []
        if not self.shortcode:
            missing.append("BUSINESS_SHORTCODE")
        if not self.passkey:
            missing.append("LNM_PASSKEY")
        if not self.callback_url:
            missing.append("CALLBACK_URL")
        if missing:
            raise ConfigurationError(f"Missing STK push configuration: {', '.join(missing)}")

    def build_stk_payload(
        self,
        amount: Any,
        phone: str,
        account_reference: str,
        timestamp: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Build the processrequest body; phone is normalised for PartyA and PhoneNumber."""
        timestamp, password = self._generate_password(timestamp)
        msisdn = normalize_phone(phone, self.country_code)

        return {
            "BusinessShortCode": self.shortcode,
            "Password":          password,
            "Timestamp":         timestamp,
            "TransactionType":   self.transaction_type,
            "Amount":            amount,
            "PartyA":            msisdn,
            "PartyB":            self.shortcode,
            "PhoneNumber":       msisdn,
            "CallBackURL":       self.callback_url,
            "AccountReference":  account_reference,
            "TransactionDesc":   self.transaction_desc,
        }

    def stk_push(self, payload: Dict[str, Any], token: str) -> Dict[str, Any]:
        """
        POST an STK push request.

        2xx bodies are returned unchanged, including bodies that carry an
        errorCode; the caller decides how to surface those.
        """
        headers = {"Authorization": f"Bearer {token}"}
        url = f"{self.base_url}{self._EP_STK_PUSH}"

        try:
            resp = self._session.post(url, json=payload, headers=headers, timeout=self.stk_push_timeout)
        except requests.RequestException as exc:
            logger.error("STK push network error: %s", exc)
            raise StkPushError(f"STK push network error – {exc}", detail=str(exc)) from exc

        data = self._decode(resp)
        logger.debug("STK push HTTP %s: %s", resp.status_code, data)

        if not resp.ok:
            logger.error("STK push error response (HTTP %s): %s", resp.status_code, data)
            raise StkPushError(f"STK push returned HTTP {resp.status_code}", detail=data)

        return data

    # Helpers

    @staticmethod
    def _decode(resp: requests.Response) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError:
            return {"raw": resp.text}
        return data if isinstance(data, dict) else {"raw": data}

    def _generate_password(self, timestamp: Optional[str] = None):
        """
        Generate the STK Push password and timestamp.

        Password = Base64(BusinessShortCode + Passkey + Timestamp)
        Timestamp = YYYYMMDDHHmmss, local time of the call
        """
        timestamp = timestamp or datetime.now().strftime("%Y%m%d%H%M%S")
        raw = f"{self.shortcode}{self.passkey}{timestamp}"
        password = base64.b64encode(raw.encode("utf-8")).decode("utf-8")
        return timestamp, password
