import asyncio

import aiosmtplib
import pytest

from pyrecurmail.common.exceptions import DispatchFailure
from pyrecurmail.common.job import Payload
from pyrecurmail.common.states import FailedAttempt, SucceededAttempt
from pyrecurmail.dispatch import DispatchResult, LoggingDispatcher, SmtpDispatcher
from pyrecurmail.execution.performer import perform_dispatch


@pytest.fixture
def smtp_dispatcher():
    return SmtpDispatcher(
        hostname="smtp.example.com",
        port=2525,
        username="sender@example.com",
        password="secret",
        timeout=5,
    )


def test_dispatch_result_helpers():
    assert DispatchResult.ok().success
    failed = DispatchResult.fail("boom")
    assert not failed.success
    assert failed.error == "boom"
    DispatchResult.ok().raise_for_failure("a@x.com")
    with pytest.raises(DispatchFailure, match="Could not send email to a@x.com: boom"):
        failed.raise_for_failure("a@x.com")


def test_smtp_builds_html_message(smtp_dispatcher):
    message = smtp_dispatcher.build_message("a@x.com", "Hi", "<b>body</b>")
    assert message["From"] == "sender@example.com"
    assert message["To"] == "a@x.com"
    assert message["Subject"] == "Hi"
    assert message.get_content_type() == "text/html"
    assert "<b>body</b>" in message.get_content()


def test_smtp_send_passes_connection_settings(smtp_dispatcher, monkeypatch):
    sent = {}

    async def fake_send(message, **kwargs):
        sent["message"] = message
        sent.update(kwargs)

    monkeypatch.setattr(aiosmtplib, "send", fake_send)

    result = asyncio.run(smtp_dispatcher.send("a@x.com", "Hi", "<p>x</p>"))

    assert result.success
    assert sent["message"]["To"] == "a@x.com"
    assert sent["hostname"] == "smtp.example.com"
    assert sent["port"] == 2525
    assert sent["username"] == "sender@example.com"
    assert sent["password"] == "secret"
    assert sent["start_tls"] is True
    assert sent["timeout"] == 5


@pytest.mark.parametrize(
    "error, expected",
    [
        (aiosmtplib.SMTPException("relay denied"), "SMTPException: relay denied"),
        (asyncio.TimeoutError(), "TimeoutError"),
        (ConnectionRefusedError("refused"), "ConnectionRefusedError: refused"),
    ],
)
def test_smtp_send_reports_failures(smtp_dispatcher, monkeypatch, error, expected):
    async def fake_send(message, **kwargs):
        raise error

    monkeypatch.setattr(aiosmtplib, "send", fake_send)

    result = asyncio.run(smtp_dispatcher.send("a@x.com", "Hi", "<p>x</p>"))

    assert not result.success
    assert result.error.startswith(expected)


def test_smtp_without_credentials_sends_anonymously():
    dispatcher = SmtpDispatcher(hostname="localhost", username="", password="")
    assert dispatcher.username is None
    assert dispatcher.password is None
    assert dispatcher.build_message("a@x.com", "Hi", "x")["From"] is None


def test_logging_dispatcher_counts_messages(caplog):
    dispatcher = LoggingDispatcher()
    with caplog.at_level("INFO"):
        result = asyncio.run(dispatcher.send("a@x.com", "Hi", "body"))
    assert result.success
    assert dispatcher.sent_count == 1
    assert "Would send 'Hi' to a@x.com" in caplog.text


def test_perform_dispatch_success(dispatcher):
    result = asyncio.run(perform_dispatch(dispatcher, "a@x.com", Payload("Hi", "body")))
    assert isinstance(result, SucceededAttempt)
    assert result.succeeded
    assert dispatcher.calls == [("a@x.com", "Hi", "body")]


def test_perform_dispatch_failure_result(dispatcher):
    dispatcher.fail = True
    result = asyncio.run(perform_dispatch(dispatcher, "a@x.com", Payload("Hi", "body")))
    assert isinstance(result, FailedAttempt)
    assert not result.succeeded
    assert result.serialize_data()["error"] == "mailbox unavailable"


def test_perform_dispatch_failed_result_reports_dispatch_failure(dispatcher):
    dispatcher.fail = True
    result = asyncio.run(perform_dispatch(dispatcher, "a@x.com", Payload("Hi", "body")))
    assert result.exception_type == "DispatchFailure"
    assert result.error == "mailbox unavailable"


def test_perform_dispatch_converts_exceptions(dispatcher):
    dispatcher.error = RuntimeError("transport exploded")
    result = asyncio.run(perform_dispatch(dispatcher, "a@x.com", Payload("Hi", "body")))
    assert isinstance(result, FailedAttempt)
    assert result.error == "transport exploded"
    assert result.exception_type == "RuntimeError"
