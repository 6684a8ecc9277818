"""Tests for the built-in notification sinks."""

import logging
import subprocess
from unittest.mock import patch
from urllib.parse import parse_qs

import httpx
import pytest

from security_monitor.errors import ConfigurationIncomplete
from security_monitor.models import Finding, Severity
from security_monitor.sinks import LogSink, ObserverSink, SmsSink, VoiceSink
from security_monitor.sinks.log import format_finding
from security_monitor.sinks.sms import sms_body
from security_monitor.sinks.voice import threat_utterance


@pytest.fixture
def finding():
    return Finding(
        category="Credential Exposure",
        severity=Severity.CRITICAL,
        file_path="/repo/src/config.js",
        message="Potential hardcoded credentials detected",
    )


class TestLogSink:
    """Test LogSink."""

    def test_format_includes_fields(self, finding):
        """Test the threat record format."""
        text = format_finding(finding)
        assert "Type: Credential Exposure" in text
        assert "Severity: CRITICAL" in text
        assert "File: /repo/src/config.js" in text
        assert "Keyword" not in text

    def test_format_includes_keyword(self):
        """Test the keyword line."""
        keyword_finding = Finding(
            category="Suspicious Code Pattern",
            severity=Severity.MEDIUM,
            file_path="a.js",
            matched_keyword="azure",
            message="m",
        )
        assert "Keyword: azure" in format_finding(keyword_finding)

    def test_logs_at_severity_level(self, finding, caplog):
        """Test log level per severity."""
        with caplog.at_level(logging.INFO, logger="security_monitor.sinks.log"):
            LogSink().send(finding)
        assert caplog.records[-1].levelno == logging.CRITICAL

    def test_announce_logs_info(self, caplog):
        """Test announcements."""
        with caplog.at_level(logging.INFO, logger="security_monitor.sinks.log"):
            LogSink().announce("Security monitoring deactivated")
        assert "Security monitoring deactivated" in caplog.text


class TestVoiceSink:
    """Test VoiceSink."""

    def test_utterance(self, finding):
        """Test the spoken message."""
        assert threat_utterance(finding) == (
            "Security threat detected: Credential Exposure. "
            "Severity level critical. Check file config.js."
        )

    def test_speaks_with_command(self, finding):
        """Test speaking via the say command."""
        sink = VoiceSink(command="say")
        with patch("security_monitor.sinks.voice.subprocess.run") as mock_run:
            sink.send(finding)
        args = mock_run.call_args[0][0]
        assert args == ["say", threat_utterance(finding)]
        assert mock_run.call_args.kwargs["check"] is True

    def test_falls_back_to_log_when_unavailable(self, finding, caplog):
        """Test fallback when say is unavailable."""
        with patch("security_monitor.sinks.voice.platform.system", return_value="Linux"):
            sink = VoiceSink()
        assert not sink.available
        with caplog.at_level(logging.INFO, logger="security_monitor.sinks.voice"):
            with patch("security_monitor.sinks.voice.subprocess.run") as mock_run:
                sink.announce("Monitoring activated")
        mock_run.assert_not_called()
        assert "ALERT: Monitoring activated" in caplog.text

    def test_command_failure_raises(self, finding):
        """Test a failing say command."""
        sink = VoiceSink(command="say")
        error = subprocess.CalledProcessError(1, ["say"])
        with patch("security_monitor.sinks.voice.subprocess.run", side_effect=error):
            with pytest.raises(subprocess.CalledProcessError):
                sink.send(finding)


TWILIO_ENV = {
    "TWILIO_SID": "AC123",
    "TWILIO_TOKEN": "tok",
    "TWILIO_FROM": "+15550001",
    "TWILIO_TO": "+15550002",
}


class TestSmsSink:
    """Test SmsSink."""

    def test_from_env_requires_all_variables(self):
        """Test incomplete Twilio environment."""
        env = dict(TWILIO_ENV, TWILIO_TOKEN="")
        with pytest.raises(ConfigurationIncomplete) as exc_info:
            SmsSink.from_env(env)
        assert "TWILIO_TOKEN" in str(exc_info.value)

    def test_from_env(self):
        """Test building from the environment."""
        sink = SmsSink.from_env(TWILIO_ENV)
        assert sink.account_sid == "AC123"
        assert sink.to_number == "+15550002"

    def test_body(self, finding):
        """Test the SMS body."""
        assert sms_body(finding) == (
            "Security Alert: [CRITICAL] Credential Exposure detected in config.js. "
            "Potential hardcoded credentials detected"
        )

    def test_posts_to_twilio(self, finding):
        """Test posting to Twilio."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(201, json={"sid": "SM1"})

        sink = SmsSink("AC123", "tok", "+15550001", "+15550002", transport=httpx.MockTransport(handler))
        sink.send(finding)

        request = captured["request"]
        assert request.method == "POST"
        assert request.url.path == "/2010-04-01/Accounts/AC123/Messages.json"
        assert request.headers["authorization"].startswith("Basic ")
        form = parse_qs(request.content.decode())
        assert form["From"] == ["+15550001"]
        assert form["To"] == ["+15550002"]
        assert form["Body"] == [sms_body(finding)]

    def test_error_response_raises(self, finding):
        """Test an error response."""
        transport = httpx.MockTransport(lambda request: httpx.Response(401))
        sink = SmsSink("AC123", "bad", "+1", "+2", transport=transport)
        with pytest.raises(httpx.HTTPStatusError):
            sink.send(finding)


class TestObserverSink:
    """Test ObserverSink."""

    def test_forwards_findings_and_announcements(self, finding):
        """Test forwarding to callbacks."""
        seen, messages = [], []
        sink = ObserverSink(seen.append, messages.append)
        sink.send(finding)
        sink.announce("hello")
        assert seen == [finding]
        assert messages == ["hello"]

    def test_announce_without_callback(self):
        """Test announce without a callback."""
        ObserverSink(lambda f: None).announce("ignored")
