# -*- coding: utf-8 -*-
"""
Tests for the error mapper and translation manager.
"""

import pytest
import requests

from models.retry import RetryConfig, RetryState
from services.error_mapper import describe_retry, map_exception
from services.exceptions import SubmissionError, TerminalSubmissionError, TransientSubmissionError
from services.translation_manager import get_language, is_rtl, set_language, tr


@pytest.fixture(autouse=True)
def english():
    previous = get_language()
    set_language("en")
    yield
    set_language(previous)


class TestTranslations:
    """Test the translation manager."""

    def test_placeholders(self):
        assert tr("wizard.step_of", current=2, total=3) == "Step 2 of 3"

    def test_unknown_key_returns_key(self):
        assert tr("no.such.key") == "no.such.key"

    def test_arabic_is_rtl(self):
        set_language("ar")

        assert is_rtl()
        assert tr("button.next") == "التالي"

    def test_unsupported_language_falls_back_to_english(self):
        set_language("xx")

        assert get_language() == "en"
        assert not is_rtl()


class TestMapException:
    """Test user-facing submission messages."""

    def test_conflict(self):
        error = TerminalSubmissionError("conflict", status_code=409)
        assert map_exception(error) == tr("error.submit.conflict")

    @pytest.mark.parametrize("status", [401, 403])
    def test_unauthorized(self, status):
        error = TerminalSubmissionError("denied", status_code=status)
        assert map_exception(error) == tr("error.submit.unauthorized")

    def test_rejection_details_from_errors_dict(self):
        error = TerminalSubmissionError(
            "bad", status_code=422, response_data={"errors": {"email": ["taken", "blocked"]}},
        )

        message = map_exception(error)

        assert "• email: taken" in message
        assert "• email: blocked" in message

    def test_rejection_without_details(self):
        error = TerminalSubmissionError("bad", status_code=400)
        assert map_exception(error) == tr("error.submit.rejected_generic")

    def test_terminal_error_is_never_reported_as_retried(self):
        error = TerminalSubmissionError("conflict", status_code=409)
        assert map_exception(error, attempts=4) == tr("error.submit.conflict")

    def test_transient_timeout(self):
        error = TransientSubmissionError(
            "timeout: read timed out", original_error=requests.exceptions.ReadTimeout(),
        )
        assert map_exception(error) == tr("error.submit.timeout")

    def test_transient_unavailable(self):
        error = TransientSubmissionError("bad gateway", status_code=502)
        assert map_exception(error) == tr("error.submit.unavailable")

    def test_exhausted_retries_wrap_reason(self):
        error = TransientSubmissionError("bad gateway", status_code=502)

        message = map_exception(error, attempts=4)

        assert message == tr(
            "error.submit.retries_exhausted", reason=tr("error.submit.unavailable"), attempts=4,
        )

    def test_plain_timeout(self):
        assert map_exception(TimeoutError()) == tr("error.submit.timeout")

    def test_plain_submission_error(self):
        assert map_exception(SubmissionError("nope")) == tr("error.submit.rejected_generic")

    def test_unexpected_error(self):
        assert map_exception(KeyError("x"), attempts=1) == tr("error.submit.unknown")


class TestDescribeRetry:
    """Test the retry indicator text."""

    def test_counts_are_one_based(self):
        state = RetryState(attempt=1, next_delay=2.0)

        text = describe_retry(state, RetryConfig(max_retries=3))

        assert text == "Submission failed. Retrying in 2s (attempt 2 of 4)..."
