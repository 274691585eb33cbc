"""Consolidated exceptions for the NextEvent SDK.

All custom exceptions are defined here to provide a single source of truth
for error handling across the SDK.
"""

from typing import Any


class NextEventError(Exception):
    """Base exception for NextEvent SDK errors"""

    pass


class APIResponseError(NextEventError):
    """Raised when a request to one of the NextEvent services fails

    Wraps the failed HTTP response (httpx or requests) so callers can inspect
    the status code, the request id and the error description sent by the API.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: Any = None,
    ) -> None:
        self.raw_message = message
        self.response = response
        self.status_code = status_code
        if status_code is None and response is not None:
            self.status_code = response.status_code
        self.description: str | None = None
        self.reason: str | None = None

        if response is not None:
            try:
                data = response.json()
            except ValueError:
                data = None
            if isinstance(data, dict):
                self.description = data.get("description") or data.get(
                    "detail"
                )
                self.reason = data.get("reason")

            message = f"APIResponseError: {message}"
            if self.request_id:
                message += f" [request id] {self.request_id}"
            if self.description:
                message += f" [description] {self.description}"
            if self.reason:
                message += f" [reason] {self.reason}"

        super().__init__(message)

    @classmethod
    def from_error(
        cls, error: "APIResponseError", message: str | None = None
    ) -> "APIResponseError":
        """Re-raise an API error as a more specific subclass"""
        return cls(
            message or error.raw_message,
            status_code=error.status_code,
            response=error.response,
        )

    @property
    def request_id(self) -> str | None:
        if self.response is None:
            return None
        return self.response.headers.get("x-request-id")

    @property
    def request(self) -> Any:
        if self.response is None:
            return None
        try:
            return self.response.request
        except RuntimeError:
            # httpx responses built without a request raise here
            return None

    def to_log_context(self) -> dict[str, Any]:
        context: dict[str, Any] = {
            "code": self.status_code,
            "message": str(self),
        }
        request = self.request
        if request is not None:
            context["request_url"] = str(request.url)
            context["request_method"] = request.method
        if self.response is not None:
            context["request_id"] = self.request_id
        return context

    def dump_as_string(self) -> str:
        """Return message, request and response as a printable block"""
        blocks = [str(self)]
        request = self.request
        if request is not None:
            blocks.append(f"{request.method} {request.url}")
        if self.response is not None:
            blocks.append(
                f"HTTP {self.response.status_code}\n{self.response.text}"
            )
        return "\n\n".join(block for block in blocks if block)


class EntityNotFoundError(APIResponseError):
    """Raised when the API answers 404 for a requested entity"""

    pass


class OrderNotFoundError(EntityNotFoundError):
    """Raised when an order or basket does not exist"""

    pass


class OrderItemNotFoundError(EntityNotFoundError):
    """Raised when an order item does not exist"""

    pass


class PaymentNotFoundError(EntityNotFoundError):
    """Raised when the payment service does not know the payment"""

    pass


class AccessCodesNotFoundError(EntityNotFoundError):
    """Raised when no access codes match a query"""

    pass


class DeviceNotFoundError(EntityNotFoundError):
    """Raised when no devices match a query"""

    pass


class ScanLogsNotFoundError(EntityNotFoundError):
    """Raised when no scan logs match a query"""

    pass


class NotAuthorizedError(APIResponseError):
    """Raised when the API rejects the credentials for an operation"""

    pass


class NotAuthenticatedError(NextEventError):
    """Raised when the SDK client could not be authenticated"""

    def __init__(self, message: str = "SDK Client is not authenticated"):
        super().__init__(message)


class BasketEmptyError(NextEventError):
    """Raised when a basket does not exist or holds no items"""

    pass


class MissingDocumentError(NextEventError):
    """Raised when ticket documents are not issued (yet)"""

    pass


class TicketNotFoundError(NextEventError):
    """Raised when an order has no tickets or is not completed"""

    pass


class InvalidArgumentError(NextEventError, ValueError):
    """Raised when an SDK method receives an invalid argument"""

    pass


class InvalidModelDataError(NextEventError, ValueError):
    """Raised when API data does not satisfy a model's required fields"""

    pass


class InvalidBaseCategoryError(NextEventError):
    """Raised when a base price is attached to a foreign base category"""

    pass


class InvalidStoreError(NextEventError, TypeError):
    """Raised when a cache does not implement the Store protocol"""

    def __init__(self, message: str = "Cache must implement the Store protocol"):
        super().__init__(message)


class CollectionError(NextEventError):
    """Raised on invalid collection data or operations"""

    pass


class QueryError(NextEventError):
    """Raised on invalid query parameters"""

    pass


class AccessCodeValidateError(NextEventError):
    """Raised when access codes cannot be validated at a gate"""

    pass


class DeviceLogoutError(NextEventError):
    """Raised when a device could not be logged out from its gate"""

    pass


class WebhookMessageError(NextEventError):
    """Raised when a webhook message cannot be verified or read"""

    pass


class ConfigurationError(NextEventError):
    """Raised when configuration is invalid or missing"""

    pass
