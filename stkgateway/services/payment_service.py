import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from stkgateway.providers import DarajaClient
from stkgateway.services.registry import PaymentRegistry
from stkgateway.services.token_cache import AccessTokenCache
from stkgateway.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class StkPushResult:
    """
    Outcome of an STK push request.

    accepted is False when Daraja answered with an errorCode body; raw then
    holds that body so it can be returned to the caller unchanged.
    """
    accepted: bool
    checkout_request_id: Optional[str]
    raw: Dict[str, Any]


class PaymentService:
    """Initiates STK pushes and records the pending transactions"""

    def __init__(
            self,
            client: DarajaClient,
            token_cache: AccessTokenCache,
            registry: PaymentRegistry
    ):
        self.client = client
        self.token_cache = token_cache
        self.registry = registry

    def initiate_stk_push(
            self,
            registration_id: str,
            phone: str,
            email: str,
            amount: Any = None,
            referral_code: Optional[str] = None
    ) -> StkPushResult:
        """
        Trigger an STK push prompt on the customer's handset

        Args:
            registration_id: Caller's registration id, sent as AccountReference
            phone: Customer phone in any supported format
            email: Customer email, kept for the downstream notification
            amount: Amount to charge, passed to Daraja as given
            referral_code: Optional referral code supplied by the caller

        Returns:
            StkPushResult

        Raises:
            ConfigurationError: Shortcode, passkey, callback URL or credentials missing
            DarajaError: Token or STK push request failed
        """
        self.client.assert_stk_config()

        token = self.token_cache.get_token()

        payload = self.client.build_stk_payload(
            amount=amount,
            phone=phone,
            account_reference=registration_id
        )
        response = self.client.stk_push(payload, token)

        if response.get('errorCode'):
            logger.error(f'Daraja rejected STK push for {registration_id}: {response}')
            return StkPushResult(accepted=False, checkout_request_id=None, raw=response)

        checkout_request_id = (
            response.get('CheckoutRequestID')
            or response.get('checkoutRequestID')
        )
        if not checkout_request_id:
            checkout_request_id = f'ck_{int(time.time() * 1000)}'
            logger.warning(
                f'Daraja response carried no CheckoutRequestID; using {checkout_request_id}'
            )

        self.registry.create(
            checkout_request_id=checkout_request_id,
            registration_id=registration_id,
            phone=phone,
            email=email,
            referral_code=referral_code,
            amount=payload['Amount']
        )

        logger.info(f'STK push initiated: {checkout_request_id} ({registration_id})')

        return StkPushResult(
            accepted=True,
            checkout_request_id=checkout_request_id,
            raw=response
        )
