#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thread-safe centralized error handling

Errors raised by cleanup actions surface on the reclamation thread, where
nobody is waiting to catch them. They are reported here instead: logged by
severity, counted, kept in a short history and handed to every registered
callback on the reporting thread.
"""

from PySide6.QtCore import QObject, Signal
from typing import Callable, List, Dict, Any, Optional
import logging
import threading
import traceback
from datetime import datetime

from .exceptions import LifetimeError, ErrorSeverity


class ErrorHandler(QObject):
    """
    Thread-safe centralized error handling system

    Callbacks run synchronously on the thread that reported the error. A
    failing callback is logged and never propagates back to the reporter.
    """

    error_occurred = Signal(object, dict)  # error, context

    def __init__(self, parent=None):
        """
        Initialize error handler

        Args:
            parent: Parent QObject for Qt lifecycle management
        """
        super().__init__(parent)

        self.logger = logging.getLogger(__name__)
        self._lock = threading.RLock()

        self._callbacks: List[Callable[[LifetimeError, dict], None]] = []

        self._error_counts = {severity: 0 for severity in ErrorSeverity}

        # Recent errors for debugging
        self._recent_errors: List[Dict[str, Any]] = []
        self._max_recent_errors = 100

        self.logger.debug("Error handler initialized")

    def register_callback(self, callback: Callable[[LifetimeError, dict], None]):
        """
        Register callback for error notifications

        Args:
            callback: Function to call with (error, context) parameters
        """
        with self._lock:
            self._callbacks.append(callback)
        self.logger.debug(f"Registered error callback: {getattr(callback, '__name__', repr(callback))}")

    def unregister_callback(self, callback: Callable[[LifetimeError, dict], None]):
        """
        Unregister callback

        Args:
            callback: Function to remove from callbacks
        """
        with self._lock:
            try:
                self._callbacks.remove(callback)
                self.logger.debug("Unregistered error callback")
            except ValueError:
                self.logger.warning("Attempted to unregister non-existent error callback")

    def handle_error(self, error: LifetimeError, context: Optional[dict] = None):
        """
        Handle error from any thread

        Args:
            error: The error that occurred
            context: Additional context information
        """
        context = dict(context or {})
        context.update({
            'handler_thread': threading.current_thread().name,
            'timestamp': datetime.now().isoformat()
        })

        self._log_error(error, context)

        with self._lock:
            self._error_counts[error.severity] += 1
            self._store_recent_error(error, context)
            callbacks = list(self._callbacks)

        self.error_occurred.emit(error, context)

        for callback in callbacks:
            try:
                callback(error, context)
            except Exception as callback_error:
                self.logger.error(f"Error callback failed: {callback_error}")
                self.logger.debug(f"Callback traceback: {traceback.format_exc()}")

    def _log_error(self, error: LifetimeError, context: dict):
        """Log error according to its severity"""
        context_items = [
            f"{key}={value}" for key, value in context.items()
            if key not in ('timestamp', 'handler_thread')
        ]

        log_msg = f"[{error.error_code}] {error.message}"
        if context_items:
            log_msg += f" | Context: {', '.join(context_items)}"

        if error.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(log_msg)
        elif error.severity == ErrorSeverity.ERROR:
            self.logger.error(log_msg)
        elif error.severity == ErrorSeverity.WARNING:
            self.logger.warning(log_msg)
        else:
            self.logger.info(log_msg)

    def _store_recent_error(self, error: LifetimeError, context: dict):
        """Store error in recent errors list for debugging"""
        self._recent_errors.append({
            'timestamp': datetime.now().isoformat(),
            'error_code': error.error_code,
            'message': error.message,
            'user_message': error.user_message,
            'severity': error.severity.value,
            'recoverable': error.recoverable,
            'thread_name': error.thread_name,
            'context': context.copy()
        })

        if len(self._recent_errors) > self._max_recent_errors:
            self._recent_errors = self._recent_errors[-self._max_recent_errors:]

    def get_error_statistics(self) -> Dict[str, int]:
        """
        Get error count statistics

        Returns:
            Dictionary with error counts by severity
        """
        with self._lock:
            return {severity.value: count for severity, count in self._error_counts.items()}

    def get_recent_errors(self, count: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Get recent errors for debugging

        Args:
            count: Number of recent errors to return (None for all)
        """
        with self._lock:
            if count is None:
                return self._recent_errors.copy()
            return self._recent_errors[-count:] if self._recent_errors else []

    def clear_statistics(self):
        """Clear error statistics and recent errors"""
        with self._lock:
            self._error_counts = {severity: 0 for severity in ErrorSeverity}
            self._recent_errors.clear()


# Global singleton instance
_global_error_handler: Optional[ErrorHandler] = None
_global_lock = threading.Lock()


def get_error_handler() -> ErrorHandler:
    """
    Get the global error handler instance, creating it on first use

    Returns:
        Global ErrorHandler instance
    """
    global _global_error_handler

    with _global_lock:
        if _global_error_handler is None:
            _global_error_handler = ErrorHandler()
        return _global_error_handler


def shutdown_error_handling():
    """Drop the global error handler (tests and interpreter shutdown)"""
    global _global_error_handler

    with _global_lock:
        if _global_error_handler is not None:
            _global_error_handler.clear_statistics()
            _global_error_handler = None


def handle_error(error: LifetimeError, context: Optional[dict] = None):
    """
    Handle an error using the global error handler

    Args:
        error: The error that occurred
        context: Additional context information
    """
    get_error_handler().handle_error(error, context)
