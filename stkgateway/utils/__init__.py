"""
Utils Package
Utility functions and helpers
"""

from stkgateway.utils.logger import get_logger, configure_app_logging, RequestLogger
from stkgateway.utils.phone import normalize_phone
from stkgateway.utils.codes import generate_referral_code

__all__ = [
    'get_logger',
    'configure_app_logging',
    'RequestLogger',
    'normalize_phone',
    'generate_referral_code'
]
