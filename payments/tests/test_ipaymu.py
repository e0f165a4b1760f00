"""Tests for the iPaymu client."""
import hashlib
import hmac
from unittest import mock

import pytest
import requests

from common.errors import GatewayError
from payments.ipaymu import IpaymuClient, get_client


@pytest.fixture
def ipaymu():
    return IpaymuClient("https://sandbox.ipaymu.test/", "secret-key", "VA123")


def _response(ok=True, status_code=200, payload=None, text=""):
    resp = mock.Mock(ok=ok, status_code=status_code, text=text)
    resp.json.return_value = payload or {}
    return resp


def test_signature_is_hmac_of_va_method_key(ipaymu):
    expected = hmac.new(b"secret-key", b"VA123POSTsecret-key", hashlib.sha256).hexdigest()
    assert ipaymu.generate_signature("post") == expected
    assert ipaymu.generate_signature("GET") != expected


def test_verify_callback_signature(ipaymu):
    assert ipaymu.verify_callback_signature(ipaymu.generate_signature("POST"))
    assert ipaymu.verify_callback_signature(ipaymu.generate_signature("POST").upper())
    assert not ipaymu.verify_callback_signature("deadbeef")
    assert not ipaymu.verify_callback_signature("")
    assert not ipaymu.verify_callback_signature(None)


def test_create_transaction(ipaymu):
    payload = {"Status": 200, "KodeTransaksi": "K-1", "PaymentUrl": "https://pay.example/K-1"}
    with mock.patch("payments.ipaymu.requests.post", return_value=_response(payload=payload)) as post:
        txn = ipaymu.create_transaction(
            product=["Ticket"], qty=[1], price=[1000], amount=1000, name="A", email="a@example.com",
            return_url="https://app/return", notify_url="https://app/notify",
        )
    assert txn.transaction_id == "K-1"
    assert txn.payment_url == "https://pay.example/K-1"

    url = post.call_args.args[0]
    kwargs = post.call_args.kwargs
    assert url == "https://sandbox.ipaymu.test/api/transaksi/merchant"
    assert kwargs["headers"]["signature"] == ipaymu.generate_signature("POST")
    assert kwargs["headers"]["va"] == "VA123"
    assert kwargs["json"]["action"] == "payment"
    assert kwargs["json"]["merchantid"] == "VA123"
    assert kwargs["json"]["notifyUrl"] == "https://app/notify"
    assert kwargs["timeout"] == 15


def test_non_2xx_raises_gateway_error(ipaymu):
    with mock.patch("payments.ipaymu.requests.post", return_value=_response(ok=False, status_code=401, text="unauthorized")):
        with pytest.raises(GatewayError) as exc:
            ipaymu.get_transaction_status("K-1")
    assert "401" in str(exc.value)


def test_transport_error_raises_gateway_error(ipaymu):
    with mock.patch("payments.ipaymu.requests.post", side_effect=requests.Timeout("slow")):
        with pytest.raises(GatewayError):
            ipaymu.refund_transaction("K-1", amount=500)


def test_incomplete_payment_response_raises(ipaymu):
    payload = {"Status": 401, "Message": "unauthorized signature"}
    with mock.patch("payments.ipaymu.requests.post", return_value=_response(payload=payload)):
        with pytest.raises(GatewayError) as exc:
            ipaymu.create_transaction(product=["T"], qty=[1], price=[1], amount=1, name="A", email="a@b.c")
    assert "unauthorized signature" in str(exc.value)


def test_refund_body(ipaymu):
    with mock.patch("payments.ipaymu.requests.post", return_value=_response(payload={"Status": 200})) as post:
        ipaymu.refund_transaction("K-9", amount=2500)
    assert post.call_args.kwargs["json"] == {"action": "refund", "id": "K-9", "amount": 2500}


def test_get_client_reads_settings(settings):
    settings.IPAYMU_BASE_URL = "https://gw.example"
    client = get_client()
    assert client.base_url == "https://gw.example"
    assert client.merchant_code == "0000001234567890"
