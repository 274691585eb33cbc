"""Webhook messages sent by NextEvent"""

import hashlib
import hmac
import json
from collections.abc import Mapping
from typing import Any

from nextevent.shared.exceptions import WebhookMessageError

from .base import Model


class WebhookMessage(Model):
    """Webhook delivery with its headers and raw payload

    The payload is only accessible after verify() checked the signature.
    """

    def __init__(self, source: dict[str, Any]) -> None:
        if isinstance(source, dict) and isinstance(source.get("headers"), Mapping):
            headers = {str(k).lower(): v for k, v in source["headers"].items()}
            source = {**source, "headers": headers}
        super().__init__(source)
        self._verified = False

    @classmethod
    def from_request(
        cls, headers: Mapping[str, str], payload: bytes | str
    ) -> "WebhookMessage":
        return cls({"headers": dict(headers), "payload": payload})

    def is_valid(self) -> bool:
        return (
            self._has("headers", "payload")
            and self.id is not None
            and self.event is not None
        )

    def _header(self, name: str) -> str | None:
        return self._source["headers"].get(name.lower())

    @property
    def id(self) -> str | None:
        return self._header("X-NE-Delivery")

    @property
    def event(self) -> str | None:
        return self._header("X-NE-Event")

    @property
    def headers(self) -> dict[str, str]:
        return self._source["headers"]

    @property
    def payload(self) -> bytes | str:
        return self._source["payload"]

    @property
    def signature(self) -> str | None:
        return self._header("X-Hub-Signature")

    def is_verified(self) -> bool:
        return self._verified

    def verify(self, secret: str | bytes) -> "WebhookMessage":
        """Check the X-Hub-Signature header against the payload

        Raises:
            WebhookMessageError: If the signature is missing, malformed,
                uses an unsupported algorithm or does not match
        """
        if self._verified:
            return self

        signature = self.signature
        if not signature:
            raise WebhookMessageError("No X-Hub-Signature in the headers")
        algo, sep, received = signature.partition("=")
        if not sep or not received:
            raise WebhookMessageError("Malformed X-Hub-Signature in the headers")
        if algo.lower() not in hashlib.algorithms_available:
            raise WebhookMessageError(f"Unsupported signature algorithm {algo}")

        key = secret.encode() if isinstance(secret, str) else secret
        payload = self.payload
        body = payload.encode() if isinstance(payload, str) else payload
        try:
            expected = hmac.new(key, body, algo.lower()).hexdigest()
        except (TypeError, ValueError) as e:
            raise WebhookMessageError(
                f"Unsupported signature algorithm {algo}"
            ) from e
        if not hmac.compare_digest(expected, received.lower()):
            raise WebhookMessageError("Invalid X-Hub-Signature in the headers")

        self._verified = True
        return self

    @property
    def json(self) -> dict[str, Any]:
        if not self._verified:
            raise WebhookMessageError(
                "First verify the message before accessing json payload"
            )
        return json.loads(self.payload)

    def get_model(self, model_class: type, *args: Any) -> Any:
        """Instantiate model_class with the payload entry named by the event"""
        if not self._verified:
            raise WebhookMessageError(
                "First verify the message before accessing the model"
            )
        data = self.json
        if self.event not in data:
            raise WebhookMessageError(f"No {self.event} data in the payload")
        return model_class(data[self.event], *args)

    def to_log_context(self) -> dict[str, Any]:
        return {"id": self.id, "event": self.event, "verified": self._verified}
