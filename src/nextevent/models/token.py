"""Access token model"""

import json
import time
from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class Token:
    """Bearer token issued by the IAM or payment service

    Attributes:
        access_token: The token value
        expires_at: Expiry as epoch seconds
        scope: Granted scope
        token_type: Token type used in the Authorization header
    """

    access_token: str
    expires_at: float
    scope: str | None = None
    token_type: str = "Bearer"

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "Token":
        """Create a token from an OAuth token response"""
        return cls(
            access_token=data["access_token"],
            expires_at=time.time() + int(data["expires_in"]),
            scope=data.get("scope"),
            token_type=data.get("token_type") or "Bearer",
        )

    @classmethod
    def from_string(cls, value: str | None) -> "Token | None":
        """Restore a token serialized with to_string, None if invalid"""
        if not value:
            return None
        try:
            data = json.loads(value)
        except (TypeError, ValueError):
            return None
        if not isinstance(data, dict) or not data.get("access_token"):
            return None
        return cls(
            access_token=data["access_token"],
            expires_at=data.get("expires_at", 0),
            scope=data.get("scope"),
            token_type=data.get("token_type") or "Bearer",
        )

    def to_string(self) -> str:
        return json.dumps(asdict(self))

    def is_expired(self) -> bool:
        return self.expires_at < time.time()

    @property
    def authorization_header(self) -> str:
        return f"{self.token_type} {self.access_token}"

    def __repr__(self) -> str:
        return (
            f"Token(token_type={self.token_type}, scope={self.scope}, "
            f"expires_at={self.expires_at})"
        )
