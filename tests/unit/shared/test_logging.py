"""Tests for the loguru logging helpers"""

import logging

import pytest
from loguru import logger

from nextevent.shared.exceptions import InvalidArgumentError
from nextevent.shared.logging import install_logging_bridge, wrap_logger


@pytest.fixture
def captured():
    """Collect loguru records emitted while the test runs"""
    records: list = []
    logger.enable("nextevent")
    sink_id = logger.add(lambda m: records.append(m.record), level="DEBUG")
    yield records
    logger.remove(sink_id)
    logger.disable("nextevent")


@pytest.mark.unit
class TestWrapLogger:
    def test_binds_default_context(self, captured):
        wrapped = wrap_logger(app_id="app1")

        wrapped.info("hello")

        assert captured[-1]["extra"]["app_id"] == "app1"
        assert captured[-1]["message"] == "hello"

    def test_uses_given_logger(self, captured):
        custom = logger.bind(component="shop")

        wrap_logger(custom, app_id="app1").warning("custom")

        assert captured[-1]["extra"] == {"component": "shop", "app_id": "app1"}

    def test_rejects_non_loguru_logger(self):
        with pytest.raises(InvalidArgumentError):
            wrap_logger(object())


@pytest.mark.unit
def test_logging_bridge_routes_stdlib_to_loguru():
    """Ensure the stdlib logging bridge forwards httpx messages into loguru."""
    messages: list[str] = []
    sink_id = logger.add(messages.append, format="{message}")

    try:
        install_logging_bridge()
        std_logger = logging.getLogger("httpx")
        std_logger.setLevel(logging.INFO)
        std_logger.info("bridged message")
    finally:
        logger.remove(sink_id)

    assert any("bridged message" in m for m in messages)
