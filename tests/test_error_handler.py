#!/usr/bin/env python3
"""
Tests for the centralized error handler and exception hierarchy
"""

import sys
import threading
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from lifetime.error_handler import (
    ErrorHandler, get_error_handler, handle_error, shutdown_error_handling
)
from lifetime.exceptions import (
    CleanupActionError, CleanupWaitInterrupted, ErrorSeverity, LifetimeError, RegistrationError
)


@pytest.fixture
def handler():
    return ErrorHandler()


class TestExceptions:

    def test_base_error_defaults(self):
        error = LifetimeError("technical detail")

        assert error.message == "technical detail"
        assert error.error_code == "LifetimeError"
        assert error.severity == ErrorSeverity.ERROR
        assert error.is_main_thread
        assert "demonstration" in error.user_message

    def test_cleanup_action_error_context(self):
        error = CleanupActionError("failed", registration_id="abc", trigger="reclaimed")

        assert error.context == {'registration_id': 'abc', 'trigger': 'reclaimed'}
        assert error.recoverable is True
        assert error.to_dict()['error_code'] == "CleanupActionError"

    def test_wait_interrupted_is_a_warning(self):
        error = CleanupWaitInterrupted(waited_ms=500)

        assert error.severity == ErrorSeverity.WARNING
        assert error.context['waited_ms'] == 500
        assert str(error) == "Cleanup wait interrupted"

    def test_registration_error_records_payload(self):
        error = RegistrationError("refused", payload=7)
        assert error.context['payload'] == 7

    def test_thread_context_captured_off_main_thread(self):
        errors = []
        worker = threading.Thread(target=lambda: errors.append(LifetimeError("x")), name="worker-1")
        worker.start()
        worker.join()

        assert errors[0].is_main_thread is False


class TestErrorHandler:

    def test_callbacks_receive_error_and_context(self, handler):
        received = []
        handler.register_callback(lambda error, context: received.append((error, context)))

        error = LifetimeError("boom")
        handler.handle_error(error, {'method': 'test'})

        assert received[0][0] is error
        assert received[0][1]['method'] == 'test'
        assert received[0][1]['handler_thread'] == threading.current_thread().name

    def test_failing_callback_does_not_propagate(self, handler):
        calls = []

        def broken(error, context):
            raise RuntimeError("callback failed")

        handler.register_callback(broken)
        handler.register_callback(lambda error, context: calls.append(error))

        handler.handle_error(LifetimeError("boom"))

        assert len(calls) == 1

    def test_unregister_callback(self, handler):
        calls = []
        callback = lambda error, context: calls.append(error)
        handler.register_callback(callback)
        handler.unregister_callback(callback)
        handler.unregister_callback(callback)

        handler.handle_error(LifetimeError("boom"))

        assert calls == []

    def test_statistics_by_severity(self, handler):
        handler.handle_error(LifetimeError("a"))
        handler.handle_error(CleanupWaitInterrupted())
        handler.handle_error(LifetimeError("b", severity=ErrorSeverity.CRITICAL))

        stats = handler.get_error_statistics()
        assert stats == {'info': 0, 'warning': 1, 'error': 1, 'critical': 1}

        handler.clear_statistics()
        assert sum(handler.get_error_statistics().values()) == 0

    def test_recent_errors_are_capped(self, handler):
        for i in range(150):
            handler.handle_error(LifetimeError(f"error {i}"))

        recent = handler.get_recent_errors()
        assert len(recent) == 100
        assert recent[-1]['message'] == "error 149"
        assert len(handler.get_recent_errors(5)) == 5


class TestGlobalHandler:

    def setup_method(self):
        shutdown_error_handling()

    def teardown_method(self):
        shutdown_error_handling()

    def test_global_handler_is_shared(self):
        assert get_error_handler() is get_error_handler()

    def test_handle_error_uses_global_handler(self):
        received = []
        get_error_handler().register_callback(lambda error, context: received.append(error))

        handle_error(LifetimeError("global"))

        assert [e.message for e in received] == ["global"]

    def test_shutdown_resets_global_handler(self):
        first = get_error_handler()
        shutdown_error_handling()
        assert get_error_handler() is not first
