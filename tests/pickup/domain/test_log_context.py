import pytest
import structlog

from pickup.utils.logging import log_context


class TestLogContext:
    def test_binds_inside_block(self):
        with log_context(request_id="req-1"):
            assert structlog.contextvars.get_contextvars()["request_id"] == "req-1"

    def test_restores_outer_values(self):
        with log_context(request_id="outer"):
            with log_context(request_id="inner", job="thank-completed"):
                assert structlog.contextvars.get_contextvars()["request_id"] == "inner"
            context = structlog.contextvars.get_contextvars()
            assert context["request_id"] == "outer"
            assert "job" not in context

    def test_cleared_after_error(self):
        with pytest.raises(RuntimeError):
            with log_context(request_id="req-2"):
                raise RuntimeError("boom")
        assert "request_id" not in structlog.contextvars.get_contextvars()
