"""Response wrappers adding SDK helpers to raw HTTP responses

Both httpx and requests responses are accepted; only the attributes the two
share are used (status_code, headers, url, content, json()).
"""

from typing import Any

from nextevent.shared.exceptions import APIResponseError

_UNSET = object()


class APIResponse:
    """JSON response returned by a NextEvent service"""

    def __init__(self, response: Any) -> None:
        self.response = response
        self._content: Any = _UNSET

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def content(self) -> Any:
        """Decoded JSON body, None for empty bodies

        Raises:
            APIResponseError: If the body is not valid JSON
        """
        if self._content is _UNSET:
            if not self.response.content:
                self._content = None
            else:
                try:
                    self._content = self.response.json()
                except ValueError as e:
                    raise APIResponseError(
                        "Invalid JSON response", response=self.response
                    ) from e
        return self._content

    @property
    def request_id(self) -> str | None:
        """Unique id of the API request, useful in support inquiries"""
        return self.response.headers.get("x-request-id")

    def to_log_context(self) -> dict[str, Any]:
        return {
            "url": str(self.response.url),
            "status_code": self.status_code,
            "request_id": self.request_id,
        }


class HALResponse(APIResponse):
    """Response parsed as HAL+JSON"""

    @property
    def embedded(self) -> Any:
        """Entities embedded in this response, or the whole content"""
        content = self.content
        if not content:
            return None
        if isinstance(content, dict) and "_embedded" in content:
            return content["_embedded"]
        return content

    def _get(self, key: str) -> Any:
        content = self.content
        if not content or not isinstance(content, dict):
            return None
        return content.get(key)

    @property
    def page_size(self) -> int | None:
        return self._get("page_size")

    @property
    def total_items(self) -> int | None:
        return self._get("total_items")

    @property
    def page_count(self) -> int | None:
        return self._get("page_count")

    @property
    def page(self) -> int | None:
        return self._get("page")
