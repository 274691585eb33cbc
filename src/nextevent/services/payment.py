"""Payment service client settling and aborting checkout payments"""

from typing import Any

import requests
from pydantic import ValidationError

from nextevent.core.config import Env
from nextevent.models.payment import Payment
from nextevent.models.token import Token
from nextevent.rest.responses import APIResponse
from nextevent.shared.exceptions import (
    APIResponseError,
    ConfigurationError,
    InvalidArgumentError,
    PaymentNotFoundError,
)
from nextevent.shared.logging import wrap_logger
from nextevent.validation.customer import Customer

PAYMENT_IPN_PATH = "payment/ipn/external"
PAYMENT_TIMEOUT = 10


class PaymentClient:
    """Reports the outcome of an external payment to NextEvent"""

    def __init__(self, logger: Any = None) -> None:
        self._logger = wrap_logger(logger)

    def set_logger(self, logger: Any = None) -> None:
        self._logger = wrap_logger(logger)

    def settle_payment(
        self,
        payment_token: Token,
        payment: Payment,
        customer: Customer | dict[str, Any],
        transaction_id: str | None = None,
    ) -> dict[str, Any]:
        """Mark a payment as settled

        Args:
            payment_token: Token from the application's /payment/token
            payment: Unexpired payment returned by the checkout
            customer: Customer data, at least an e-mail address
            transaction_id: Transaction id of the payment provider

        Returns:
            Response content with the request id under `request_id`

        Raises:
            InvalidArgumentError: If the payment is expired or the customer
                data is invalid
            PaymentNotFoundError: If the payment service does not know
                the payment
            APIResponseError: If the settlement failed
        """
        if not isinstance(payment, Payment) or payment.is_expired():
            raise InvalidArgumentError(
                "payment must be a valid and unexpired Payment"
            )
        try:
            customer = Customer.model_validate(
                customer.model_dump() if isinstance(customer, Customer) else customer
            )
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid customer data: {e}") from e

        context = {"invoice_uuid": payment.uuid, "transaction_id": transaction_id}
        payload = {
            "uuid": payment.uuid,
            "reference": payment.reference,
            "authorization": payment.authorization,
            "status": "settled",
            "transaction-id": transaction_id,
            "customer": customer.model_dump(exclude_none=True),
        }
        response = self._post(payment_token, payload, "settlement", context)
        if response.status_code != 200:
            error = APIResponseError(
                "Unexpected response", response=response.response
            )
            self._logger.bind(**context, **error.to_log_context()).error(
                "Payment settlement failed"
            )
            raise error

        content = response.content if isinstance(response.content, dict) else {}
        self._logger.bind(
            **context, result=content, **response.to_log_context()
        ).info("Payment successfully settled")
        return {**content, "request_id": response.request_id}

    def abort_payment(
        self, payment_token: Token, payment: Payment, reason: str
    ) -> bool:
        """Mark a payment as aborted

        Returns:
            True if the payment service accepted the abort
        """
        if not isinstance(payment, Payment):
            raise InvalidArgumentError("payment must be a valid Payment")

        context = {"invoice_uuid": payment.uuid}
        payload = {
            "uuid": payment.uuid,
            "reference": payment.reference,
            "authorization": payment.authorization,
            "status": "aborted",
            "reason": reason,
        }
        response = self._post(payment_token, payload, "abortion", context)
        success = response.status_code == 200
        self._logger.bind(
            **context, success=success, **response.to_log_context()
        ).info("Payment aborted" if success else "Payment not aborted")
        return success

    def _post(
        self,
        payment_token: Token,
        payload: dict[str, Any],
        action: str,
        context: dict[str, Any],
    ) -> APIResponse:
        base_url = Env.get_var("payment_service_url")
        if not base_url:
            raise ConfigurationError(
                "No payment_service_url configured for environment "
                f"{Env.get_env()}"
            )

        headers = Env.default_headers()
        headers["Authorization"] = payment_token.authorization_header
        try:
            response = requests.post(
                f"{base_url}{PAYMENT_IPN_PATH}",
                json=payload,
                headers=headers,
                timeout=PAYMENT_TIMEOUT,
                verify=Env.verify_tls(),
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                error = PaymentNotFoundError(
                    f"Payment {action} failed: payment not found",
                    response=e.response,
                )
            else:
                error = APIResponseError(
                    f"Payment {action} failed", response=e.response
                )
            self._logger.bind(**context, **error.to_log_context()).error(
                f"Payment {action} failed"
            )
            raise error from e
        except requests.RequestException as e:
            self._logger.bind(**context).error(f"Payment {action} failed: {e}")
            raise APIResponseError(f"Payment {action} failed: {e}") from e
        return APIResponse(response)
