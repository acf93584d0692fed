"""
Unit Tests for the Daraja client
=================================
HTTP is mocked at the exact call sites used by DarajaClient:
  - requests.get for the OAuth token
  - client._session.post for the STK push endpoint
"""

import base64
import json
import pytest
from unittest.mock import Mock, patch

import requests

from stkgateway.errors import ConfigurationError
from stkgateway.providers import AccessTokenError, StkPushError
from stkgateway.providers.daraja import (
    DarajaClient,
    _BASE_URLS,
    parse_stk_callback,
    resolve_base_url,
)


def _mock_http_response(json_data, status_code: int = 200) -> Mock:
    """Return a mock requests.Response whose .json() returns json_data."""
    resp = Mock()
    resp.ok = 200 <= status_code < 400
    resp.status_code = status_code
    resp.json.return_value = json_data
    resp.text = json.dumps(json_data)
    return resp


class TestDarajaClient:

    # ── fixtures ──────────────────────────────────────────────────────────

    @pytest.fixture
    def base_config(self):
        return {
            "environment":      "sandbox",
            "consumer_key":     "test_consumer_key",
            "consumer_secret":  "test_consumer_secret",
            "shortcode":        "174379",
            "passkey":          "test_passkey",
            "callback_url":     "https://example.com/api/callback",
            "transaction_desc": "TriCre8 Bootcamp payment",
        }

    @pytest.fixture
    def client(self, base_config):
        return DarajaClient(base_config)

    # ── environment ───────────────────────────────────────────────────────

    def test_sandbox_is_default(self, base_config):
        base_config.pop("environment")
        assert DarajaClient(base_config).base_url == "https://sandbox.safaricom.co.ke"

    @pytest.mark.parametrize("env, expected", [
        ("production", _BASE_URLS["production"]),
        ("PRODUCTION", _BASE_URLS["production"]),
        ("sandbox",    _BASE_URLS["sandbox"]),
        ("staging",    _BASE_URLS["sandbox"]),
        (None,         _BASE_URLS["sandbox"]),
    ])
    def test_resolve_base_url(self, env, expected):
        assert resolve_base_url(env) == expected

    # ── fetch_access_token ────────────────────────────────────────────────

    def test_fetch_access_token_uses_basic_auth(self, client):
        token_resp = _mock_http_response({"access_token": "tok_abc", "expires_in": "3599"})

        with patch("requests.get", return_value=token_resp) as mock_get:
            token, expires_in = client.fetch_access_token()

        assert token == "tok_abc"
        assert expires_in == 3599
        args, kwargs = mock_get.call_args
        assert args[0] == (
            "https://sandbox.safaricom.co.ke/oauth/v1/generate?grant_type=client_credentials"
        )
        assert kwargs["auth"] == ("test_consumer_key", "test_consumer_secret")
        assert kwargs["timeout"] == 10

    def test_fetch_access_token_defaults_expiry(self, client):
        with patch("requests.get", return_value=_mock_http_response({"access_token": "tok"})):
            _, expires_in = client.fetch_access_token()
        assert expires_in == 3600

    def test_fetch_access_token_missing_credentials_makes_no_request(self, base_config):
        client = DarajaClient({**base_config, "consumer_secret": ""})

        with patch("requests.get") as mock_get:
            with pytest.raises(ConfigurationError, match="consumer credentials"):
                client.fetch_access_token()

        mock_get.assert_not_called()

    def test_fetch_access_token_http_error(self, client):
        error_body = {"errorCode": "400.008.01", "errorMessage": "Invalid Authentication passed"}
        with patch("requests.get", return_value=_mock_http_response(error_body, 400)):
            with pytest.raises(AccessTokenError) as exc_info:
                client.fetch_access_token()

        assert exc_info.value.detail == error_body

    def test_fetch_access_token_missing_token_field(self, client):
        with patch("requests.get", return_value=_mock_http_response({"expires_in": "3599"})):
            with pytest.raises(AccessTokenError, match="No access_token"):
                client.fetch_access_token()

    def test_fetch_access_token_network_error(self, client):
        with patch("requests.get", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(AccessTokenError, match="refused"):
                client.fetch_access_token()

    # ── build_stk_payload ─────────────────────────────────────────────────

    def test_build_stk_payload(self, client):
        payload = client.build_stk_payload(
            amount=1, phone="0712345678", account_reference="REG-001",
            timestamp="20240101120000",
        )

        expected_password = base64.b64encode(b"174379test_passkey20240101120000").decode()
        assert payload == {
            "BusinessShortCode": "174379",
            "Password":          expected_password,
            "Timestamp":         "20240101120000",
            "TransactionType":   "CustomerPayBillOnline",
            "Amount":            1,
            "PartyA":            "254712345678",
            "PartyB":            "174379",
            "PhoneNumber":       "254712345678",
            "CallBackURL":       "https://example.com/api/callback",
            "AccountReference":  "REG-001",
            "TransactionDesc":   "TriCre8 Bootcamp payment",
        }

    def test_generated_timestamp_is_14_digits(self, client):
        timestamp, password = client._generate_password()

        assert len(timestamp) == 14 and timestamp.isdigit()
        assert base64.b64decode(password).decode() == f"174379test_passkey{timestamp}"

    @pytest.mark.parametrize("missing, name", [
        ("shortcode",    "BUSINESS_SHORTCODE"),
        ("passkey",      "LNM_PASSKEY"),
        ("callback_url", "CALLBACK_URL"),
    ])
    def test_assert_stk_config(self, base_config, missing, name):
        client = DarajaClient({**base_config, missing: ""})
        with pytest.raises(ConfigurationError, match=name):
            client.assert_stk_config()

    # ── stk_push ──────────────────────────────────────────────────────────

    def test_stk_push_sends_bearer_token(self, client):
        body = {"CheckoutRequestID": "ws_CO_1", "ResponseCode": "0"}

        with patch.object(client._session, "post", return_value=_mock_http_response(body)) as mock_post:
            result = client.stk_push({"Amount": 1}, "tok_abc")

        assert result == body
        args, kwargs = mock_post.call_args
        assert args[0] == "https://sandbox.safaricom.co.ke/mpesa/stkpush/v1/processrequest"
        assert kwargs["headers"]["Authorization"] == "Bearer tok_abc"
        assert kwargs["json"] == {"Amount": 1}
        assert kwargs["timeout"] == 15

    def test_stk_push_returns_error_code_body_unchanged(self, client):
        body = {"requestId": "1", "errorCode": "500.001.1001", "errorMessage": "Merchant does not exist"}

        with patch.object(client._session, "post", return_value=_mock_http_response(body)):
            assert client.stk_push({}, "tok") == body

    def test_stk_push_http_error_carries_provider_body(self, client):
        body = {"errorCode": "404.001.03", "errorMessage": "Invalid Access Token"}

        with patch.object(client._session, "post", return_value=_mock_http_response(body, 401)):
            with pytest.raises(StkPushError) as exc_info:
                client.stk_push({}, "tok")

        assert exc_info.value.detail == body

    def test_stk_push_timeout(self, client):
        with patch.object(client._session, "post", side_effect=requests.Timeout("read timed out")):
            with pytest.raises(StkPushError, match="read timed out"):
                client.stk_push({}, "tok")

    def test_stk_push_non_json_body(self, client):
        resp = _mock_http_response(None, 502)
        resp.json.side_effect = ValueError("no json")
        resp.text = "<html>Bad Gateway</html>"

        with patch.object(client._session, "post", return_value=resp):
            with pytest.raises(StkPushError) as exc_info:
                client.stk_push({}, "tok")

        assert exc_info.value.detail == {"raw": "<html>Bad Gateway</html>"}


class TestParseStkCallback:

    def test_nested_success(self):
        payload = {
            "Body": {
                "stkCallback": {
                    "MerchantRequestID": "mrq-001",
                    "CheckoutRequestID": "ws_CO_ABC123",
                    "ResultCode":        0,
                    "ResultDesc":        "The service request is processed successfully.",
                    "CallbackMetadata": {
                        "Item": [
                            {"Name": "Amount",             "Value": 1500},
                            {"Name": "MpesaReceiptNumber", "Value": "NLJ7RT61SV"},
                            {"Name": "Balance"},
                            {"Name": "PhoneNumber",        "Value": 254712345678},
                        ]
                    },
                }
            }
        }
        callback = parse_stk_callback(payload)

        assert callback.shape == "nested"
        assert callback.checkout_request_id == "ws_CO_ABC123"
        assert callback.succeeded is True
        assert callback.metadata == {
            "Amount": 1500,
            "MpesaReceiptNumber": "NLJ7RT61SV",
            "Balance": None,
            "PhoneNumber": 254712345678,
        }
        assert callback.raw is payload["Body"]["stkCallback"]

    def test_flat_body(self):
        callback = parse_stk_callback({"checkoutRequestID": "ws_CO_FLAT", "resultCode": 1032})

        assert callback.shape == "flat"
        assert callback.checkout_request_id == "ws_CO_FLAT"
        assert callback.result_code == 1032
        assert callback.succeeded is False

    def test_missing_result_code_is_not_success(self):
        callback = parse_stk_callback({"CheckoutRequestID": "ws_CO_1"})

        assert callback.result_code == -1
        assert callback.succeeded is False

    @pytest.mark.parametrize("code", ["0", 0.5, False, None, 1])
    def test_only_integer_zero_is_success(self, code):
        assert parse_stk_callback({"CheckoutRequestID": "x", "ResultCode": code}).succeeded is False

    @pytest.mark.parametrize("payload", [None, [], "text", 42])
    def test_unknown_shape_fails_closed(self, payload):
        callback = parse_stk_callback(payload)

        assert callback.shape == "unknown"
        assert callback.checkout_request_id is None
        assert callback.succeeded is False

    def test_body_without_stk_callback_falls_back_to_flat(self):
        callback = parse_stk_callback({"Body": {"other": {}}, "CheckoutRequestID": "ws_CO_2", "ResultCode": 0})

        assert callback.shape == "flat"
        assert callback.checkout_request_id == "ws_CO_2"
        assert callback.succeeded is True

    def test_malformed_metadata_is_ignored(self):
        callback = parse_stk_callback({
            "CheckoutRequestID": "ws_CO_3",
            "ResultCode": 0,
            "CallbackMetadata": {"Item": "not-a-list"},
        })
        assert callback.metadata == {}
