"""Tests for the SDK exception hierarchy"""

import httpx
import pytest

from nextevent.shared.exceptions import (
    APIResponseError,
    EntityNotFoundError,
    InvalidArgumentError,
    InvalidModelDataError,
    InvalidStoreError,
    NextEventError,
    NotAuthenticatedError,
    OrderNotFoundError,
)


def _response(status_code: int, json=None, headers=None) -> httpx.Response:
    request = httpx.Request("GET", "https://app1.nextevent.test/order/42")
    return httpx.Response(
        status_code, json=json, headers=headers, request=request
    )


@pytest.mark.unit
class TestAPIResponseError:
    def test_message_contains_response_details(self):
        response = _response(
            404,
            json={"description": "Order not found", "reason": "deleted"},
            headers={"x-request-id": "req-1"},
        )

        error = APIResponseError("GET failed", response=response)

        assert error.status_code == 404
        assert error.request_id == "req-1"
        assert error.description == "Order not found"
        assert error.reason == "deleted"
        assert str(error) == (
            "APIResponseError: GET failed [request id] req-1 "
            "[description] Order not found [reason] deleted"
        )

    def test_detail_is_used_as_description(self):
        error = APIResponseError(
            "failed", response=_response(400, json={"detail": "Bad input"})
        )

        assert error.description == "Bad input"

    def test_non_json_body_is_ignored(self):
        request = httpx.Request("GET", "https://app1.nextevent.test/")
        response = httpx.Response(500, text="<html>oops</html>", request=request)

        error = APIResponseError("failed", response=response)

        assert error.status_code == 500
        assert error.description is None

    def test_without_response(self):
        error = APIResponseError("connection refused", status_code=None)

        assert str(error) == "connection refused"
        assert error.request_id is None
        assert error.to_log_context() == {
            "code": None,
            "message": "connection refused",
        }

    def test_log_context_includes_request(self):
        response = _response(401, headers={"x-request-id": "req-2"})

        context = APIResponseError("denied", response=response).to_log_context()

        assert context["code"] == 401
        assert context["request_url"] == "https://app1.nextevent.test/order/42"
        assert context["request_method"] == "GET"
        assert context["request_id"] == "req-2"

    def test_from_error_keeps_response(self):
        original = APIResponseError("failed", response=_response(404))

        error = OrderNotFoundError.from_error(original, "Order not found")

        assert isinstance(error, EntityNotFoundError)
        assert error.response is original.response
        assert error.status_code == 404
        assert str(error).startswith("APIResponseError: Order not found")

    def test_from_error_defaults_to_original_message(self):
        original = APIResponseError("GET failed", response=_response(404))

        error = OrderNotFoundError.from_error(original)

        assert str(error).count("APIResponseError") == 1

    def test_dump_as_string(self):
        response = _response(404, json={"description": "missing"})

        dump = APIResponseError("failed", response=response).dump_as_string()

        assert "GET https://app1.nextevent.test/order/42" in dump
        assert "HTTP 404" in dump


@pytest.mark.unit
class TestErrorHierarchy:
    def test_all_errors_share_base(self):
        for error_class in (
            APIResponseError,
            NotAuthenticatedError,
            InvalidArgumentError,
            InvalidModelDataError,
            InvalidStoreError,
        ):
            assert issubclass(error_class, NextEventError)

    def test_value_errors(self):
        assert issubclass(InvalidArgumentError, ValueError)
        assert issubclass(InvalidModelDataError, ValueError)

    def test_not_authenticated_default_message(self):
        assert str(NotAuthenticatedError()) == "SDK Client is not authenticated"
