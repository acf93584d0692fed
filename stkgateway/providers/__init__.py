from typing import Any, Mapping

from stkgateway.providers.base import DarajaError, AccessTokenError, StkPushError
from stkgateway.providers.daraja import DarajaClient, StkCallback, parse_stk_callback


def build_daraja_client(app_config: Mapping[str, Any]) -> DarajaClient:
    """
    Build a Daraja client from Flask app configuration.

    Args:
        app_config: Flask ``app.config`` (or any mapping with the same keys)

    Returns:
        Configured DarajaClient
    """
    return DarajaClient(_get_daraja_config(app_config))


def _get_daraja_config(app_config: Mapping[str, Any]) -> dict:
    return {
        # Credentials
        'consumer_key':     app_config.get('CONSUMER_KEY'),
        'consumer_secret':  app_config.get('CONSUMER_SECRET'),
        'environment':      app_config.get('DARAJA_ENV', 'sandbox'),
        # Lipa na M-Pesa Online
        'shortcode':        app_config.get('BUSINESS_SHORTCODE'),
        'passkey':          app_config.get('LNM_PASSKEY'),
        'callback_url':     app_config.get('CALLBACK_URL'),
        'transaction_type': app_config.get('TRANSACTION_TYPE', 'CustomerPayBillOnline'),
        'transaction_desc': app_config.get('TRANSACTION_DESC', 'Payment'),
        'country_code':     app_config.get('COUNTRY_CODE', '254'),
        # Timeouts
        'token_timeout':    app_config.get('TOKEN_TIMEOUT', 10),
        'stk_push_timeout': app_config.get('STK_PUSH_TIMEOUT', 15),
    }


__all__ = [
    'build_daraja_client',
    'DarajaClient',
    'DarajaError',
    'AccessTokenError',
    'StkPushError',
    'StkCallback',
    'parse_stk_callback',
]
