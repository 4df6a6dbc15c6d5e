"""
Unit tests for routing standard-library logs through loguru.
"""
import logging
import pytest

from devevent.core.logging import logger


@pytest.mark.unit
class TestInterceptHandler:
    """Test that stdlib loggers end up in loguru sinks."""

    def test_uvicorn_records_reach_loguru(self):
        messages = []
        sink_id = logger.add(messages.append, format="{level}|{message}", level="INFO")
        try:
            logging.getLogger("uvicorn.error").warning("worker booted")
        finally:
            logger.remove(sink_id)

        assert any(m.strip() == "WARNING|worker booted" for m in messages)
