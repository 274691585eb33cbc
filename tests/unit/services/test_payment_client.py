"""Tests for the payment service client"""

import json
import time

import pytest
import responses

from nextevent.models.payment import Payment
from nextevent.models.token import Token
from nextevent.services.payment import PaymentClient
from nextevent.shared.exceptions import (
    APIResponseError,
    InvalidArgumentError,
    PaymentNotFoundError,
)

PAYMENT_IPN_URL = "https://payment.nextevent.com/payment/ipn/external"


@pytest.fixture
def payment_token() -> Token:
    return Token(access_token="payment-token", expires_at=time.time() + 600)


@pytest.fixture
def payment(sample_payment_data) -> Payment:
    return Payment(sample_payment_data)


@pytest.mark.unit
class TestSettlePayment:
    @responses.activate
    def test_posts_settlement(self, payment_token, payment, sample_customer):
        responses.post(
            PAYMENT_IPN_URL,
            json={"status": "settled"},
            status=200,
            headers={"x-request-id": "pay-req"},
        )

        result = PaymentClient().settle_payment(
            payment_token, payment, sample_customer, "txn-1"
        )

        assert result == {"status": "settled", "request_id": "pay-req"}
        request = responses.calls[0].request
        assert request.headers["Authorization"] == "Bearer payment-token"
        body = json.loads(request.body)
        assert body["uuid"] == payment.uuid
        assert body["reference"] == "NE-42"
        assert body["authorization"] == "auth-secret-42"
        assert body["status"] == "settled"
        assert body["transaction-id"] == "txn-1"
        assert body["customer"]["email"] == "thomas.muster@example.com"
        assert body["customer"]["address"]["country"] == "CH"

    def test_rejects_expired_payment(
        self, payment_token, sample_payment_data, sample_customer
    ):
        expired = Payment({**sample_payment_data, "expires": "2000-01-01T00:00:00Z"})

        with pytest.raises(InvalidArgumentError):
            PaymentClient().settle_payment(payment_token, expired, sample_customer)

    def test_rejects_non_payment(self, payment_token, sample_customer):
        with pytest.raises(InvalidArgumentError):
            PaymentClient().settle_payment(payment_token, {"id": 1}, sample_customer)

    def test_rejects_invalid_customer(self, payment_token, payment):
        with pytest.raises(InvalidArgumentError):
            PaymentClient().settle_payment(payment_token, payment, {"name": "x"})

    @responses.activate
    def test_unknown_payment(self, payment_token, payment, sample_customer):
        responses.post(PAYMENT_IPN_URL, json={"detail": "unknown"}, status=404)

        with pytest.raises(PaymentNotFoundError) as excinfo:
            PaymentClient().settle_payment(payment_token, payment, sample_customer)

        assert excinfo.value.status_code == 404

    @responses.activate
    def test_unexpected_status(self, payment_token, payment, sample_customer):
        responses.post(PAYMENT_IPN_URL, json={}, status=202)

        with pytest.raises(APIResponseError) as excinfo:
            PaymentClient().settle_payment(payment_token, payment, sample_customer)

        assert excinfo.value.status_code == 202

    @responses.activate
    def test_server_error(self, payment_token, payment, sample_customer):
        responses.post(PAYMENT_IPN_URL, json={}, status=500)

        with pytest.raises(APIResponseError) as excinfo:
            PaymentClient().settle_payment(payment_token, payment, sample_customer)

        assert not isinstance(excinfo.value, PaymentNotFoundError)


@pytest.mark.unit
class TestAbortPayment:
    @responses.activate
    def test_abort(self, payment_token, payment):
        responses.post(PAYMENT_IPN_URL, json={"status": "aborted"}, status=200)

        assert PaymentClient().abort_payment(payment_token, payment, "timeout")

        body = json.loads(responses.calls[0].request.body)
        assert body["status"] == "aborted"
        assert body["reason"] == "timeout"

    @responses.activate
    def test_abort_not_accepted(self, payment_token, payment):
        responses.post(PAYMENT_IPN_URL, status=204)

        assert PaymentClient().abort_payment(payment_token, payment, "x") is False

    @responses.activate
    def test_abort_unknown_payment(self, payment_token, payment):
        responses.post(PAYMENT_IPN_URL, status=404)

        with pytest.raises(PaymentNotFoundError):
            PaymentClient().abort_payment(payment_token, payment, "x")
