"""IAM service client issuing the bearer token for the application API"""

from dataclasses import dataclass
from typing import Any

import requests

from nextevent.core.config import Env
from nextevent.models.token import Token
from nextevent.rest.responses import APIResponse
from nextevent.shared.exceptions import (
    APIResponseError,
    ConfigurationError,
    InvalidStoreError,
)
from nextevent.shared.logging import wrap_logger
from nextevent.store.base import Store

IAM_TOKEN_KEY = "iam-client-token"
IAM_TIMEOUT = 2


@dataclass
class Credentials:
    """Client credentials for the IAM service"""

    name: str
    password: str
    scope: str

    def __repr__(self) -> str:
        return f"Credentials(name={self.name}, scope={self.scope})"


class IAMClient:
    """Fetches and caches IAM tokens

    Tokens are kept in the given store so several processes can share one
    token until it expires.
    """

    def __init__(
        self,
        credentials: Credentials,
        cache: Store,
        logger: Any = None,
    ) -> None:
        self.credentials = credentials
        self.cache = cache
        self._logger = wrap_logger(logger)

    @property
    def cache(self) -> Store:
        return self._cache

    @cache.setter
    def cache(self, cache: Store) -> None:
        if not isinstance(cache, Store):
            raise InvalidStoreError()
        self._cache = cache

    def set_logger(self, logger: Any = None) -> None:
        self._logger = wrap_logger(logger)

    def get_token(self) -> Token:
        """Return the cached token or request a new one

        Raises:
            APIResponseError: If the IAM service rejects the request
        """
        token = Token.from_string(self._cache.get(IAM_TOKEN_KEY))
        if token and not token.is_expired():
            self._logger.debug("Use cached IAM token")
            return token

        token = self._request_token()
        self._cache.set(IAM_TOKEN_KEY, token.to_string())
        return token

    def get_new_token(self) -> Token:
        """Drop the cached token and request a new one"""
        self._cache.delete(IAM_TOKEN_KEY)
        self._logger.info("Force IAM client to fetch a new token")
        return self.get_token()

    def _request_token(self) -> Token:
        base_url = Env.get_var("iam_service_url")
        if not base_url:
            raise ConfigurationError(
                f"No iam_service_url configured for environment {Env.get_env()}"
            )

        try:
            response = requests.post(
                f"{base_url}oauth/basic",
                data={
                    "grant_type": "client_credentials",
                    "scope": self.credentials.scope,
                },
                auth=(self.credentials.name, self.credentials.password),
                headers=Env.default_headers(),
                timeout=IAM_TIMEOUT,
                verify=Env.verify_tls(),
            )
            response.raise_for_status()
            token = Token.from_response(response.json())
        except requests.HTTPError as e:
            error = APIResponseError(str(e), response=e.response)
            self._logger.bind(**error.to_log_context()).error(
                "The IAM client failed fetching a new token"
            )
            raise error from e
        except requests.RequestException as e:
            error = APIResponseError(f"IAM token request failed: {e}")
            self._logger.bind(**error.to_log_context()).error(
                "The IAM client failed fetching a new token"
            )
            raise error from e
        except (KeyError, TypeError, ValueError) as e:
            raise APIResponseError(
                f"Invalid token response from IAM service: {e}",
                status_code=response.status_code,
            ) from e

        self._logger.bind(**APIResponse(response).to_log_context()).info(
            "Use fetched IAM token from IAM service"
        )
        return token
