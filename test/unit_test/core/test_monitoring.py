"""Unit tests for Logfire monitoring helpers."""

from unittest.mock import MagicMock, patch

from early_autism_detector.core import monitoring
from early_autism_detector.core.monitoring import (
    initialize_logfire,
    log_api_request,
    log_assessment_scored,
    log_chat_completion,
    log_error,
)

MODULE = "early_autism_detector.core.monitoring"


class TestInitializeLogfire:
    """Test Logfire initialization function."""

    @patch(f"{MODULE}.LOGFIRE_ENABLED", False)
    @patch(f"{MODULE}.logger")
    def test_disabled(self, mock_logger):
        assert initialize_logfire() is False
        mock_logger.info.assert_called_once()
        assert "disabled" in mock_logger.info.call_args[0][0].lower()

    @patch(f"{MODULE}.LOGFIRE_ENABLED", True)
    @patch(f"{MODULE}.LOGFIRE_TOKEN", "")
    @patch(f"{MODULE}.logger")
    def test_enabled_without_token(self, mock_logger):
        assert initialize_logfire() is False
        mock_logger.warning.assert_called_once()
        assert "token" in mock_logger.warning.call_args[0][0].lower()

    @patch(f"{MODULE}.LOGFIRE_ENABLED", True)
    @patch(f"{MODULE}.LOGFIRE_TOKEN", "test-token")
    @patch(f"{MODULE}.LOGFIRE_TRACE_SQLALCHEMY", False)
    def test_configures_and_instruments(self):
        app = MagicMock()
        with patch(f"{MODULE}.logfire") as mock_logfire:
            assert initialize_logfire(app) is True

        mock_logfire.configure.assert_called_once()
        assert mock_logfire.configure.call_args.kwargs["token"] == "test-token"
        mock_logfire.instrument_pydantic_ai.assert_called_once()
        mock_logfire.instrument_httpx.assert_called_once()
        mock_logfire.instrument_fastapi.assert_called_once_with(app=app)
        mock_logfire.instrument_sqlalchemy.assert_not_called()

    @patch(f"{MODULE}.LOGFIRE_ENABLED", True)
    @patch(f"{MODULE}.LOGFIRE_TOKEN", "test-token")
    def test_fastapi_skipped_without_app(self):
        with patch(f"{MODULE}.logfire") as mock_logfire:
            initialize_logfire()
        mock_logfire.instrument_fastapi.assert_not_called()

    @patch(f"{MODULE}.LOGFIRE_ENABLED", True)
    @patch(f"{MODULE}.LOGFIRE_TOKEN", "test-token")
    @patch(f"{MODULE}.logger")
    def test_configure_failure_is_reported(self, mock_logger):
        with patch(f"{MODULE}.logfire") as mock_logfire:
            mock_logfire.configure.side_effect = RuntimeError("boom")
            assert initialize_logfire() is False
        mock_logger.error.assert_called_once()

    @patch(f"{MODULE}.LOGFIRE_ENABLED", True)
    @patch(f"{MODULE}.LOGFIRE_TOKEN", "test-token")
    @patch(f"{MODULE}.logger")
    def test_instrumentation_failure_is_not_fatal(self, mock_logger):
        with patch(f"{MODULE}.logfire") as mock_logfire:
            mock_logfire.instrument_httpx.side_effect = RuntimeError("missing extra")
            assert initialize_logfire() is True
        assert any("HTTPX" in call.args[0] for call in mock_logger.warning.call_args_list)


class TestLoggingHelpers:
    def test_log_api_request(self):
        with patch(f"{MODULE}.logfire") as mock_logfire:
            log_api_request("GET", "/api/v1/children", 200, 12.5)
        mock_logfire.info.assert_called_once()
        kwargs = mock_logfire.info.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["status_code"] == 200

    def test_log_chat_completion(self):
        with patch(f"{MODULE}.logfire") as mock_logfire:
            log_chat_completion("chat", "deepseek-chat", 100.0, succeeded=True)
        assert mock_logfire.info.call_args.kwargs["model"] == "deepseek-chat"
        assert mock_logfire.info.call_args.kwargs["succeeded"] is True

    def test_log_assessment_scored(self):
        with patch(f"{MODULE}.logfire") as mock_logfire:
            log_assessment_scored("a-1", 3, "Medium Risk")
        assert mock_logfire.info.call_args.kwargs == {"assessment_id": "a-1", "score": 3, "risk_level": "Medium Risk"}

    def test_log_error_with_context(self):
        with patch(f"{MODULE}.logfire") as mock_logfire:
            log_error("ValueError", "bad", {"path": "/x"})
        mock_logfire.error.assert_called_once_with("ValueError: bad", path="/x")

    def test_helpers_never_raise(self):
        with patch(f"{MODULE}.logfire") as mock_logfire, patch(f"{MODULE}.logger") as mock_logger:
            mock_logfire.info.side_effect = RuntimeError("not configured")
            mock_logfire.error.side_effect = RuntimeError("not configured")
            log_api_request("GET", "/", 200, 1.0)
            log_chat_completion("chat", "m", 1.0, succeeded=False)
            log_assessment_scored("a", 0, "Low Risk")
            log_error("E", "m")
        assert mock_logger.debug.call_count == 4


def test_flags_are_booleans():
    assert isinstance(monitoring.LOGFIRE_ENABLED, bool)
    assert isinstance(monitoring.LOGFIRE_TRACE_FASTAPI, bool)
