"""Tests for the generic preparer/sender/responder pipeline."""

import threading

import httpx
import pytest

from autorest_azure.core.errors import PollingCancelledError
from autorest_azure.core.pipeline import (
    by_closing,
    by_discarding_body,
    copy_body,
    create_preparer,
    decode_json,
    decorate_sender,
    delay,
    extract_header_value,
    get_cancel_event,
    get_polling_delay,
    prepare,
    respond,
    response_has_status_code,
    response_requires_polling,
    send,
    with_cancel,
    with_header,
)


@pytest.mark.unit
class TestPreparers:
    """Test preparer composition."""

    def test_prepare_without_decorators_returns_request(self) -> None:
        request = httpx.Request("GET", "https://example.test/")
        assert prepare(request) is request

    def test_decorators_apply_innermost_first(self) -> None:
        preparer = create_preparer(with_header("X-Order", "1"), with_header("X-Order", "2"))
        request = preparer(httpx.Request("GET", "https://example.test/"))
        assert request.headers["X-Order"] == "2"

    def test_with_cancel_attaches_event(self) -> None:
        event = threading.Event()
        request = prepare(httpx.Request("GET", "https://example.test/"), with_cancel(event))
        assert get_cancel_event(request) is event

    def test_get_cancel_event_absent(self) -> None:
        assert get_cancel_event(httpx.Request("GET", "https://example.test/")) is None


@pytest.mark.unit
class TestSenders:
    """Test sender decoration."""

    def test_last_decorator_is_outermost(self) -> None:
        calls: list[str] = []

        def base(request: httpx.Request) -> httpx.Response:
            calls.append("base")
            return httpx.Response(200)

        def tag(name: str):
            def decorator(sender):
                def _send(request: httpx.Request) -> httpx.Response:
                    calls.append(name)
                    return sender(request)

                return _send

            return decorator

        decorate_sender(base, tag("inner"), tag("outer"))(
            httpx.Request("GET", "https://example.test/")
        )
        assert calls == ["outer", "inner", "base"]

    def test_send_returns_sender_response(self) -> None:
        response = httpx.Response(204)
        result = send(httpx.Request("GET", "https://example.test/"), lambda r: response)
        assert result is response


@pytest.mark.unit
class TestResponders:
    """Test responder composition and body handling."""

    def test_by_closing_closes_body(self, make_response) -> None:
        response = make_response(200, b"payload")
        respond(response, by_closing())
        assert response.is_closed

    def test_by_closing_closes_on_error(self, make_response) -> None:
        response = make_response(500, b"payload")

        def failing(responder):
            def _respond(resp: httpx.Response) -> None:
                raise RuntimeError("inspection failed")

            return _respond

        with pytest.raises(RuntimeError, match="inspection failed"):
            respond(response, failing, by_closing())
        assert response.is_closed

    def test_by_discarding_body_drains_stream(self, make_response) -> None:
        response = make_response(200, b"drain me")
        respond(response, by_discarding_body())
        assert response.is_closed
        assert response.content == b"drain me"

    def test_copy_body_replaces_stream(self, make_response) -> None:
        response = make_response(400, b'{"error": {}}')
        original_stream = response.stream

        body = copy_body(response)

        assert body == b'{"error": {}}'
        assert response.is_closed
        assert response.stream is not original_stream
        assert isinstance(response.stream, httpx.ByteStream)
        assert response.read() == body
        assert b"".join(response.iter_bytes()) == body

    def test_decode_json(self) -> None:
        assert decode_json(b'{"a": 1}') == {"a": 1}

    def test_decode_json_rejects_garbage(self) -> None:
        with pytest.raises(ValueError):
            decode_json(b"<html>oops</html>")


@pytest.mark.unit
class TestResponsePredicates:
    """Test status and polling predicates."""

    def test_has_status_code(self) -> None:
        response = httpx.Response(404)
        assert response_has_status_code(response, 200, 404)
        assert not response_has_status_code(response, 200)
        assert not response_has_status_code(response)

    def test_has_status_code_without_response(self) -> None:
        assert not response_has_status_code(None, 200)

    @pytest.mark.parametrize(
        ("status_code", "expected"),
        [(200, False), (201, True), (202, True), (204, False), (500, False)],
    )
    def test_requires_polling_default_codes(self, status_code: int, expected: bool) -> None:
        assert response_requires_polling(httpx.Response(status_code)) is expected

    def test_requires_polling_explicit_codes(self) -> None:
        assert response_requires_polling(httpx.Response(202), 202)
        assert not response_requires_polling(httpx.Response(201), 202)

    def test_ok_never_requires_polling(self) -> None:
        assert not response_requires_polling(httpx.Response(200), 200)

    def test_extract_header_value(self) -> None:
        response = httpx.Response(200, headers={"X-Thing": "value"})
        assert extract_header_value("x-thing", response) == "value"
        assert extract_header_value("x-missing", response) == ""
        assert extract_header_value("x-thing", None) == ""


@pytest.mark.unit
class TestPollingDelay:
    """Test Retry-After handling and the cancellable delay."""

    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("5", 5.0),
            ("1.5", 1.5),
            ("0", 0.0),
            ("soon", 30.0),
            ("-1", 30.0),
            ("", 30.0),
            ("nan", 30.0),
            ("inf", 30.0),
            ("-inf", 30.0),
            ("1e400", 30.0),
        ],
    )
    def test_retry_after(self, header: str, expected: float) -> None:
        response = httpx.Response(202, headers={"Retry-After": header})
        assert get_polling_delay(response, 30.0) == expected

    def test_missing_retry_after_uses_default(self) -> None:
        assert get_polling_delay(httpx.Response(202), 12.0) == 12.0

    def test_delay_without_cancel(self) -> None:
        delay(0)

    def test_delay_not_cancelled(self) -> None:
        delay(0, threading.Event())

    def test_delay_cancelled(self) -> None:
        event = threading.Event()
        event.set()
        with pytest.raises(PollingCancelledError) as exc_info:
            delay(60, event)
        assert exc_info.value.method == "delay"

    def test_delay_cancelled_while_waiting(self) -> None:
        event = threading.Event()
        timer = threading.Timer(0.05, event.set)
        timer.start()
        try:
            with pytest.raises(PollingCancelledError):
                delay(30, event)
        finally:
            timer.cancel()
