#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Tracked resources: values whose cleanup runs once they are no longer needed

A TrackedResource lives on the heap; the names that refer to it live in
frames on the call stack. When the last of those names goes away the
coordinator notices and runs the resource's CleanupTask in the background.
Holders that know when they are done can release explicitly, or use the
resource as a context manager for deterministic release on scope exit.
"""

from typing import Callable, Optional

from .logger import logger
from .services.interfaces import ICleanupCoordinator
from .services.service_config import get_default_coordinator


Notify = Callable[[str], None]


class CleanupTask:
    """
    Cleanup action for one TrackedResource

    Captures the payload by value. Must never hold the resource itself, or
    the resource could not become unreachable.
    """

    def __init__(self, payload: int, notify: Optional[Notify] = None):
        self.payload = payload
        self._notify = notify or logger.info

    def __call__(self):
        self._notify(f"TrackedResource with value: {self.payload} is being cleaned")

    def __repr__(self):
        return f"CleanupTask(payload={self.payload})"


class TrackedResource:
    """
    Value wrapper registered for cleanup at construction

    Args:
        payload: Integer tag identifying the resource in notices
        coordinator: Coordinator to register with (process default if None)
        notify: Sink for creation and cleanup notices (console log if None)
    """

    def __init__(self, payload: int, coordinator: Optional[ICleanupCoordinator] = None,
                 notify: Optional[Notify] = None):
        self.value = payload
        notify = notify or logger.info

        notify(f"Object created with value: {payload}")

        coordinator = coordinator or get_default_coordinator()
        self._registration = coordinator.register(
            self, CleanupTask(payload, notify), description=f"TrackedResource({payload})"
        )

    @property
    def payload(self) -> int:
        return self.value

    @property
    def released(self) -> bool:
        """Whether the cleanup action has run (or is running)"""
        return self._registration.released

    def release(self) -> bool:
        """
        Run the cleanup action now, on this thread

        Safe to call repeatedly; only the first call has any effect.

        Returns:
            True if this call ran the action
        """
        return self._registration.release()

    def __enter__(self) -> 'TrackedResource':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False

    def __repr__(self):
        state = "released" if self.released else "live"
        return f"<TrackedResource value={self.value} {state}>"
