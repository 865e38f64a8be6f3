#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thread-aware exception hierarchy for the lifetime demonstrations

Cleanup actions run on whichever thread consumes a registration (the caller
for explicit release, the coordinator's reclamation thread otherwise), so
every error captures the thread it was raised on.
"""

import threading
from PySide6.QtCore import QThread
from typing import Dict, Any, Optional
from datetime import datetime
from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for categorization and log routing"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class LifetimeError(Exception):
    """
    Base exception for all lifetime demo errors

    Captures context information and the originating thread, and provides
    a short user-facing message for console reports.
    """

    def __init__(self,
                 message: str,
                 error_code: Optional[str] = None,
                 user_message: Optional[str] = None,
                 recoverable: bool = False,
                 severity: ErrorSeverity = ErrorSeverity.ERROR,
                 context: Optional[Dict[str, Any]] = None):
        """
        Initialize lifetime error

        Args:
            message: Technical error message for logging
            error_code: Unique error code for categorization
            user_message: User-friendly message for console display
            recoverable: Whether the demonstration can carry on
            severity: Error severity level
            context: Additional context information
        """
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.user_message = user_message or self._generate_user_message()
        self.recoverable = recoverable
        self.severity = severity
        self.timestamp = datetime.now()
        self.context = context or {}

        # Thread context information
        current_thread = QThread.currentThread()
        self.thread_name = current_thread.objectName() or threading.current_thread().name
        self.is_main_thread = threading.current_thread() is threading.main_thread()

    def _generate_user_message(self) -> str:
        """Generate user-friendly message from technical message"""
        return "An error occurred during the demonstration. Please check the logs for details."

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging"""
        return {
            'error_code': self.error_code,
            'message': self.message,
            'user_message': self.user_message,
            'severity': self.severity.value,
            'recoverable': self.recoverable,
            'timestamp': self.timestamp.isoformat(),
            'thread_name': self.thread_name,
            'is_main_thread': self.is_main_thread,
            'context': self.context
        }


class RegistrationError(LifetimeError):
    """Cleanup registration refused by the coordinator"""

    def __init__(self, message: str, payload: Optional[Any] = None, **kwargs):
        """
        Initialize registration error

        Args:
            message: Technical error message
            payload: Payload of the resource being registered
            **kwargs: Additional LifetimeError arguments
        """
        context = kwargs.get('context', {})
        if payload is not None:
            context['payload'] = payload
        kwargs['context'] = context

        super().__init__(message, **kwargs)

    def _generate_user_message(self) -> str:
        return "The resource could not be registered for cleanup."


class CleanupActionError(LifetimeError):
    """A cleanup action raised while it was being run"""

    def __init__(self, message: str, registration_id: Optional[str] = None,
                 trigger: Optional[str] = None, **kwargs):
        """
        Initialize cleanup action error

        Args:
            message: Technical error message
            registration_id: Registration whose action failed
            trigger: What consumed the registration (explicit or reclaimed)
            **kwargs: Additional LifetimeError arguments
        """
        self.registration_id = registration_id
        self.trigger = trigger

        context = kwargs.get('context', {})
        if registration_id:
            context['registration_id'] = registration_id
        if trigger:
            context['trigger'] = trigger
        kwargs['context'] = context
        kwargs.setdefault('recoverable', True)

        super().__init__(message, **kwargs)

    def _generate_user_message(self) -> str:
        return "A cleanup action failed. The registration was consumed and will not be retried."


class CleanupWaitInterrupted(LifetimeError):
    """The pause that lets pending cleanup actions run was interrupted"""

    def __init__(self, message: str = "Cleanup wait interrupted",
                 waited_ms: Optional[int] = None, **kwargs):
        """
        Initialize wait interruption error

        Args:
            message: Technical error message
            waited_ms: Length of the pause that was interrupted
            **kwargs: Additional LifetimeError arguments
        """
        context = kwargs.get('context', {})
        if waited_ms is not None:
            context['waited_ms'] = waited_ms
        kwargs['context'] = context
        kwargs.setdefault('severity', ErrorSeverity.WARNING)

        super().__init__(message, **kwargs)

    def _generate_user_message(self) -> str:
        return "Waiting for cleanup was interrupted."


class ConfigurationError(LifetimeError):
    """Invalid demo configuration"""

    def __init__(self, message: str, setting_key: Optional[str] = None, **kwargs):
        """
        Initialize configuration error

        Args:
            message: Technical error message
            setting_key: Settings key that caused the error
            **kwargs: Additional LifetimeError arguments
        """
        context = kwargs.get('context', {})
        if setting_key:
            context['setting_key'] = setting_key
        kwargs['context'] = context

        super().__init__(message, **kwargs)

    def _generate_user_message(self) -> str:
        return "Demo configuration is invalid. Please check the settings."
