"""RestClient - thin HTTP wrapper for the NextEvent application API"""

from collections.abc import Callable
from typing import Any

import httpx
from loguru import logger as _default_logger

from nextevent.shared.exceptions import APIResponseError, InvalidArgumentError
from nextevent.shared.logging import install_logging_bridge, wrap_logger

from .responses import HALResponse

# Sentinel telling a request to keep the client's default timeout
USE_CLIENT_DEFAULT = httpx.USE_CLIENT_DEFAULT


class RestClient:
    """Low-level REST client

    Responsibilities:
    - Accept and Authorization headers
    - JSON payloads
    - Converting HTTP and transport errors into APIResponseError
    - Retrying once after a 401 when an unauthorized handler is set
    """

    def __init__(
        self,
        http_client: httpx.Client,
        logger: Any = None,
    ) -> None:
        """Initialize REST client

        Args:
            http_client: httpx client configured with the app base URL
            logger: Optional loguru logger
        """
        self._http_client = http_client
        self._logger = wrap_logger(logger)
        self.authorization_header: str | None = None
        self._unauthorized_handler: Callable[[], None] | None = None
        install_logging_bridge()

    @staticmethod
    def build_http_client(
        base_url: str,
        timeout: float = 5,
        headers: dict[str, str] | None = None,
        verify: bool = True,
        transport: httpx.BaseTransport | None = None,
    ) -> httpx.Client:
        """Create an httpx Client with request/response logging hooks."""
        install_logging_bridge()
        return httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
            verify=verify,
            transport=transport,
            event_hooks={
                "request": [_log_httpx_request],
                "response": [_log_httpx_response],
            },
        )

    @property
    def http_client(self) -> httpx.Client:
        return self._http_client

    def set_logger(self, logger: Any = None) -> None:
        self._logger = wrap_logger(logger)

    def set_authorization_header(self, header: str | None) -> "RestClient":
        self.authorization_header = header
        return self

    def set_unauthorized_handler(
        self, handler: Callable[[], None] | None
    ) -> "RestClient":
        """Register a callback renewing the Authorization header after a 401

        Requests sent with the client's own header are retried once after the
        handler ran. Requests with an explicit authorization_header are not.
        """
        self._unauthorized_handler = handler
        return self

    def get(
        self, url: str, authorization_header: str | None = None
    ) -> HALResponse:
        return self._send("GET", url, authorization_header)

    def post(
        self,
        url: str,
        payload: dict | list | None = None,
        authorization_header: str | None = None,
        timeout: Any = USE_CLIENT_DEFAULT,
    ) -> HALResponse:
        """Send a POST request

        Args:
            url: Request path relative to the app URL
            payload: Optional JSON payload
            authorization_header: Overrides the client's Authorization header
            timeout: Request timeout, the client default if omitted

        Returns:
            Parsed HAL response
        """
        if not isinstance(payload, (dict, list)):
            payload = None
        return self._send(
            "POST", url, authorization_header, payload=payload, timeout=timeout
        )

    def put(
        self,
        url: str,
        payload: dict,
        authorization_header: str | None = None,
    ) -> HALResponse:
        if not isinstance(payload, dict):
            raise InvalidArgumentError(
                "Invalid payload argument supplied. Dict expected"
            )
        return self._send("PUT", url, authorization_header, payload=payload)

    def patch(
        self,
        url: str,
        payload: dict,
        authorization_header: str | None = None,
    ) -> HALResponse:
        if not isinstance(payload, dict):
            raise InvalidArgumentError(
                "Invalid payload argument supplied. Dict expected"
            )
        return self._send("PATCH", url, authorization_header, payload=payload)

    def delete(
        self, url: str, authorization_header: str | None = None
    ) -> bool:
        response = self._send("DELETE", url, authorization_header)
        return 200 <= response.status_code < 300

    def _headers(self, authorization_header: str | None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if authorization_header:
            headers["Authorization"] = authorization_header
        elif self.authorization_header:
            headers["Authorization"] = self.authorization_header
        return headers

    def _send(
        self,
        method: str,
        url: str,
        authorization_header: str | None = None,
        payload: dict | list | None = None,
        timeout: Any = USE_CLIENT_DEFAULT,
    ) -> HALResponse:
        try:
            return self._send_once(
                method, url, authorization_header, payload, timeout
            )
        except APIResponseError as e:
            if (
                e.status_code != 401
                or authorization_header
                or self._unauthorized_handler is None
            ):
                raise

        self._unauthorized_handler()
        return self._send_once(method, url, authorization_header, payload, timeout)

    def _send_once(
        self,
        method: str,
        url: str,
        authorization_header: str | None,
        payload: dict | list | None,
        timeout: Any,
    ) -> HALResponse:
        try:
            response = self._http_client.request(
                method,
                url,
                headers=self._headers(authorization_header),
                json=payload,
                timeout=timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error = APIResponseError(str(e), response=e.response)
            self._logger.bind(**error.to_log_context()).error(
                f"REST {method} request failed"
            )
            raise error from e
        except httpx.RequestError as e:
            error = APIResponseError(f"{method} {url} failed: {e}")
            self._logger.bind(**error.to_log_context()).error(
                f"REST {method} request failed"
            )
            raise error from e

        hal_response = HALResponse(response)
        self._logger.bind(**hal_response.to_log_context()).debug(
            f"REST {method}"
        )
        return hal_response


def _log_httpx_request(request: httpx.Request) -> None:
    """Log outbound httpx requests with headers (auth masked)."""
    headers = {
        k: ("***" if k.lower() == "authorization" else v)
        for k, v in request.headers.items()
    }
    _default_logger.debug(
        f"HTTPX request: {request.method} {request.url} {headers}"
    )


def _log_httpx_response(response: httpx.Response) -> None:
    """Log httpx responses with status."""
    _default_logger.debug(
        f"HTTPX response: status={response.status_code} url={response.url}"
    )
