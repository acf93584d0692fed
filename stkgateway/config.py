import os
from dotenv import load_dotenv

load_dotenv()


def _int_env(name, default):
    value = os.getenv(name)
    return int(value) if value else default


class Config:
    """Base configuration"""
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key')
    PORT = _int_env('PORT', 3000)

    # Daraja credentials
    CONSUMER_KEY = os.getenv('CONSUMER_KEY')
    CONSUMER_SECRET = os.getenv('CONSUMER_SECRET')
    DARAJA_ENV = os.getenv('DARAJA_ENV', 'sandbox')

    # Lipa na M-Pesa Online
    BUSINESS_SHORTCODE = os.getenv('BUSINESS_SHORTCODE')
    LNM_PASSKEY = os.getenv('LNM_PASSKEY')
    CALLBACK_URL = os.getenv('CALLBACK_URL')
    TRANSACTION_TYPE = os.getenv('TRANSACTION_TYPE', 'CustomerPayBillOnline')
    TRANSACTION_DESC = os.getenv('TRANSACTION_DESC', 'TriCre8 Bootcamp payment')
    COUNTRY_CODE = os.getenv('COUNTRY_CODE', '254')

    # Downstream notification
    MAKE_WEBHOOK_URL = os.getenv('MAKE_WEBHOOK_URL')
    REFERRAL_CODE_PREFIX = os.getenv('REFERRAL_CODE_PREFIX', 'GD2025-')
    NOTIFY_EAGER = False

    # Timeouts (seconds)
    TOKEN_TIMEOUT = _int_env('TOKEN_TIMEOUT', 10)
    STK_PUSH_TIMEOUT = _int_env('STK_PUSH_TIMEOUT', 15)
    WEBHOOK_TIMEOUT = _int_env('WEBHOOK_TIMEOUT', 10)
    TOKEN_EXPIRY_MARGIN = _int_env('TOKEN_EXPIRY_MARGIN', 5)

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


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
    CONSUMER_KEY = 'test_consumer_key'
    CONSUMER_SECRET = 'test_consumer_secret'
    DARAJA_ENV = 'sandbox'
    BUSINESS_SHORTCODE = '174379'
    LNM_PASSKEY = 'test_passkey'
    CALLBACK_URL = 'https://example.com/api/callback'
    MAKE_WEBHOOK_URL = None
    NOTIFY_EAGER = True
    LOG_DIR = None


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
