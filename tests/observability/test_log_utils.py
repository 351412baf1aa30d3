import logging

from visual_notes.observability.correlation import (
    bind_correlation_id,
    get_correlation_id,
    reset_correlation_id,
)
from visual_notes.observability.log_utils import (
    describe_value,
    log_with_context,
    summarize_elements,
)


class TestDescribeValue:
    def test_collapses_whitespace(self):
        assert describe_value("line one\n   line two") == "line one line two"

    def test_truncates_long_text(self):
        rendered = describe_value("x" * 250, max_length=200)

        assert rendered.startswith("x" * 200)
        assert rendered.endswith("...(+50 chars)")

    def test_summarizes_element_lists(self, build):
        elements = [build.rect(0, 0), build.rect(200, 0), build.text("t", 0, 100)]

        assert describe_value(elements) == "3 elements (2 rectangle, 1 text)"

    def test_other_containers_report_size_only(self):
        assert describe_value([1, 2]) == "<2 items>"
        assert describe_value({"a": 1}) == "<1 keys>"
        assert describe_value(None) == "none"


def test_summarize_empty_list():
    assert summarize_elements([]) == "0 elements"


def test_log_with_context_appends_fields(caplog):
    logger = logging.getLogger("tests.log_utils")

    with caplog.at_level(logging.INFO, logger="tests.log_utils"):
        log_with_context(logger, logging.INFO, "stage done", stage="verification", removed=2)

    assert caplog.messages == ["stage done | stage=verification removed=2"]


class TestCorrelationId:
    def test_accepts_token_like_ids(self):
        value, token = bind_correlation_id("req-123")
        try:
            assert value == "req-123"
            assert get_correlation_id() == "req-123"
        finally:
            reset_correlation_id(token)

        assert get_correlation_id() == ""

    def test_replaces_unsafe_ids(self):
        value, token = bind_correlation_id("bad id\nwith newline")
        reset_correlation_id(token)

        assert value != "bad id\nwith newline"
        assert len(value) == 32
