import pytest
from unittest.mock import Mock

import requests

from estatedesk.billing.zarinpal import ZarinpalGateway

pytestmark = pytest.mark.payment

MERCHANT_ID = "11111111-2222-3333-4444-555555555555"


def make_response(payload=None, status_code=200, json_error=False):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if json_error:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def gateway(session):
    return ZarinpalGateway(
        merchant_id=MERCHANT_ID,
        api_base="https://api.zarinpal.com/pg/v4/payment/",
        start_pay_base="https://www.zarinpal.com/pg/StartPay",
        timeout=5,
        session=session,
    )


def test_request_payment_success(gateway, session):
    session.post.return_value = make_response(
        {"data": {"code": 100, "authority": "A00000000000000000000000000123456789"}, "errors": []}
    )

    result = gateway.request_payment("SMALL", "https://app.example.com/api/payments/verify")

    assert result.success is True
    assert result.authority == "A00000000000000000000000000123456789"
    assert result.pay_url == "https://www.zarinpal.com/pg/StartPay/A00000000000000000000000000123456789"

    url = session.post.call_args.args[0]
    body = session.post.call_args.kwargs["json"]
    assert url == "https://api.zarinpal.com/pg/v4/payment/request.json"
    assert body["merchant_id"] == MERCHANT_ID
    assert body["amount"] == 4_900_000
    assert body["callback_url"] == "https://app.example.com/api/payments/verify"
    assert session.post.call_args.kwargs["timeout"] == 5


def test_request_payment_uses_large_plan_price(gateway, session):
    session.post.return_value = make_response({"data": {"code": 100, "authority": "A1"}, "errors": []})

    gateway.request_payment("LARGE", "https://app.example.com/cb")

    assert session.post.call_args.kwargs["json"]["amount"] == 9_900_000


@pytest.mark.parametrize("payload", [
    {"data": {"code": -9, "authority": "A1"}, "errors": []},
    {"data": {"code": 100}, "errors": []},
    {"data": [], "errors": {"code": -10, "message": "Terminal is not valid"}},
    {"data": {"code": 100, "authority": "A1"}, "errors": [{"code": -11}]},
])
def test_request_payment_rejected_by_gateway(gateway, session, payload):
    session.post.return_value = make_response(payload)

    result = gateway.request_payment("SMALL", "https://app.example.com/cb")

    assert result.success is False
    assert result.error


def test_request_payment_http_error(gateway, session):
    session.post.return_value = make_response({}, status_code=503)

    assert gateway.request_payment("SMALL", "https://app.example.com/cb").success is False


def test_request_payment_transport_error_never_raises(gateway, session):
    session.post.side_effect = requests.Timeout("read timed out")

    result = gateway.request_payment("SMALL", "https://app.example.com/cb")

    assert result.success is False


def test_request_payment_non_json_body(gateway, session):
    session.post.return_value = make_response(json_error=True)

    assert gateway.request_payment("SMALL", "https://app.example.com/cb").success is False


def test_request_payment_without_merchant_id(session):
    gateway = ZarinpalGateway(None, "https://api.example.com", "https://pay.example.com", session=session)

    result = gateway.request_payment("SMALL", "https://app.example.com/cb")

    assert result.success is False
    session.post.assert_not_called()


def test_trial_plan_cannot_be_requested(gateway, session):
    result = gateway.request_payment("TRIAL", "https://app.example.com/cb")

    assert result.success is False
    session.post.assert_not_called()


def test_verify_payment_success(gateway, session):
    session.post.return_value = make_response({"data": {"code": 100, "ref_id": 201}, "errors": []})

    result = gateway.verify_payment("LARGE", "A1")

    assert result.success is True
    assert result.ref_id == "201"
    assert result.already_verified is False
    body = session.post.call_args.kwargs["json"]
    assert session.post.call_args.args[0].endswith("/verify.json")
    assert body == {"merchant_id": MERCHANT_ID, "amount": 9_900_000, "authority": "A1"}


def test_verify_payment_already_verified(gateway, session):
    session.post.return_value = make_response({"data": {"code": 101, "ref_id": "201"}, "errors": []})

    result = gateway.verify_payment("SMALL", "A1")

    assert result.success is True
    assert result.already_verified is True
    assert result.ref_id == "201"


def test_verify_payment_rejected(gateway, session):
    session.post.return_value = make_response({"data": [], "errors": {"code": -51}})

    result = gateway.verify_payment("SMALL", "A1")

    assert result.success is False


def test_verify_payment_connection_error(gateway, session):
    session.post.side_effect = requests.ConnectionError("connection refused")

    assert gateway.verify_payment("SMALL", "A1").success is False
