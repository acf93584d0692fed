"""
Pytest Configuration and Fixtures
"""
import os

# Keep test runs from writing rotating log files
os.environ.setdefault('LOG_DIR', '')

import pytest
from stkgateway import create_app
from stkgateway.extensions import get_gateway


@pytest.fixture(scope='function')
def app():
    """Create application for testing; every test gets fresh in-memory state"""
    app = create_app('testing')

    ctx = app.app_context()
    ctx.push()

    yield app

    ctx.pop()


@pytest.fixture(scope='function')
def client(app):
    """Create a test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def gateway(app):
    return get_gateway()


@pytest.fixture(scope='function')
def pending_transaction(gateway):
    """A PENDING record as created by a successful STK push"""
    return gateway.registry.create(
        checkout_request_id='ws_CO_PENDING_001',
        registration_id='REG-001',
        phone='0712345678',
        email='student@example.com',
        referral_code='FRIEND-01',
        amount=1
    )


@pytest.fixture
def success_callback():
    def _build(checkout_request_id='ws_CO_PENDING_001', items=None):
        if items is None:
            items = [
                {"Name": "Amount", "Value": 1.0},
                {"Name": "MpesaReceiptNumber", "Value": "NLJ7RT61SV"},
                {"Name": "TransactionDate", "Value": 20191219102115},
                {"Name": "PhoneNumber", "Value": 254712345678},
            ]
        return {
            "Body": {
                "stkCallback": {
                    "MerchantRequestID": "29115-34620561-1",
                    "CheckoutRequestID": checkout_request_id,
                    "ResultCode": 0,
                    "ResultDesc": "The service request is processed successfully.",
                    "CallbackMetadata": {"Item": items}
                }
            }
        }
    return _build


@pytest.fixture
def cancelled_callback():
    return {
        "Body": {
            "stkCallback": {
                "MerchantRequestID": "29115-34620561-1",
                "CheckoutRequestID": "ws_CO_PENDING_001",
                "ResultCode": 1032,
                "ResultDesc": "Request cancelled by user"
            }
        }
    }
