#!/usr/bin/env python3
"""
CleanupCoordinator - runs a one-shot cleanup action once its resource is gone

Each registration arms a weakref finalizer on the resource. The finalizer
callback carries only the registration id, so neither the coordinator nor
the action keeps the resource reachable. When the resource is collected the
id is queued and a background thread runs the action; a holder may also
release explicitly, in which case the action runs on the caller's thread.
Whichever path removes the registration from the active set runs the action,
so every action runs exactly once.
"""

from typing import Any, Callable, Dict, Optional
from datetime import datetime
import atexit
import gc
import queue
import threading
import uuid
import weakref

from PySide6.QtCore import QObject, Signal

from .base_service import BaseService
from .interfaces import ICleanupCoordinator, RegistrationState, ReleaseTrigger
from ..exceptions import CleanupActionError, RegistrationError


class CoordinatorSignals(QObject):
    """Qt signals published by a CleanupCoordinator"""

    registration_added = Signal(str, str)   # registration_id, description
    cleanup_completed = Signal(str, str)    # registration_id, trigger
    cleanup_failed = Signal(str, str)       # registration_id, error message


class Registration:
    """
    Handle binding one resource identity to one cleanup action

    Owned by the coordinator. Holds no reference to the resource itself.
    """

    def __init__(self, registration_id: str, action: Callable[[], None],
                 description: str, coordinator: 'CleanupCoordinator'):
        self.registration_id = registration_id
        self.description = description
        self.state = RegistrationState.ACTIVE
        self.trigger: Optional[ReleaseTrigger] = None
        self.registered_at = datetime.now()
        self.released_at: Optional[datetime] = None
        self._action: Optional[Callable[[], None]] = action
        self._coordinator = coordinator
        self._finalizer: Optional[weakref.finalize] = None

    @property
    def released(self) -> bool:
        return self.state is RegistrationState.RELEASED

    def release(self) -> bool:
        """Run the action now if nobody has yet"""
        return self._coordinator.release(self)

    def __repr__(self):
        return (f"<Registration {self.registration_id[:8]} {self.description!r} "
                f"{self.state.value}>")


class CleanupCoordinator(BaseService, ICleanupCoordinator):
    """
    Coordinator for post-collection cleanup actions.

    Features:
    - Weak finalizers so registration never extends a resource's lifetime
    - Background reclamation thread decoupled from the caller
    - Exactly-once consumption under an internal lock
    - Failed actions are reported through the error handler, never re-run
    """

    def __init__(self, thread_name: str = "cleanup-coordinator"):
        super().__init__("CleanupCoordinator")

        self.signals = CoordinatorSignals()

        self._registrations: Dict[str, Registration] = {}
        self._lock = threading.RLock()
        self._accepting = True

        # Reclamation queue; None is the stop sentinel
        self._pending: "queue.Queue[Optional[str]]" = queue.Queue()
        self._pending_count = 0
        self._pending_cond = threading.Condition(self._lock)

        # Statistics
        self._total_registered = 0
        self._total_explicit = 0
        self._total_reclaimed = 0
        self._total_failed = 0

        self._worker = threading.Thread(
            target=self._reclamation_loop, name=thread_name, daemon=True
        )
        self._worker.start()

        # Drain queued cleanups on interpreter shutdown
        atexit.register(self._emergency_cleanup)

        self._log_operation("Initialized", f"reclamation thread '{thread_name}'", level="debug")

    def register(self, resource: Any, action: Callable[[], None],
                 description: Optional[str] = None) -> Registration:
        """Register a cleanup action keyed by the resource's identity"""
        if not callable(action):
            raise RegistrationError(
                f"Cleanup action must be callable, got {type(action).__name__}"
            )

        description = description or f"{type(resource).__name__}@{id(resource):#x}"

        with self._lock:
            if not self._accepting:
                raise RegistrationError(
                    "Coordinator has been shut down",
                    context={'description': description}
                )

            registration = Registration(str(uuid.uuid4()), action, description, self)
            try:
                registration._finalizer = weakref.finalize(
                    resource, self._on_unreachable, registration.registration_id
                )
            except TypeError as e:
                raise RegistrationError(
                    f"{type(resource).__name__} cannot be tracked: {e}",
                    context={'description': description}
                ) from e

            self._registrations[registration.registration_id] = registration
            self._total_registered += 1

        self.logger.debug(f"Registered cleanup {registration.registration_id} for {description}")
        self.signals.registration_added.emit(registration.registration_id, description)
        return registration

    def release(self, registration: Registration,
                trigger: ReleaseTrigger = ReleaseTrigger.EXPLICIT) -> bool:
        """Run the registration's action exactly once and discard it"""
        return self._consume(registration.registration_id, trigger)

    def request_reclamation(self) -> int:
        """Advisory collection request; pending actions still run asynchronously"""
        collected = gc.collect()
        self._log_operation("Reclamation requested", f"{collected} unreachable objects", level="debug")
        return collected

    def wait_for_pending(self, timeout: Optional[float] = None) -> bool:
        """Block until every queued reclamation has been processed"""
        with self._pending_cond:
            return self._pending_cond.wait_for(lambda: self._pending_count == 0, timeout)

    def active_count(self) -> int:
        with self._lock:
            return len(self._registrations)

    def is_active(self, registration: Registration) -> bool:
        with self._lock:
            return registration.registration_id in self._registrations

    def get_statistics(self) -> Dict[str, Any]:
        """Get registration and cleanup counters"""
        with self._lock:
            stats = {
                "total_registered": self._total_registered,
                "released_explicitly": self._total_explicit,
                "reclaimed": self._total_reclaimed,
                "failed_actions": self._total_failed,
                "active_registrations": len(self._registrations),
                "accepting": self._accepting,
                "pending_reclamations": self._pending_count,
            }
        return stats

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting registrations and stop the reclamation thread"""
        with self._lock:
            if not self._accepting:
                return
            self._accepting = False
            self._pending.put(None)

        atexit.unregister(self._emergency_cleanup)

        if wait:
            self._worker.join(timeout=10)
            if self._worker.is_alive():
                self.logger.warning("Reclamation thread did not stop within 10s")

        self._log_operation("Shut down", f"{self.active_count()} registrations still active")

    # Private methods

    def _on_unreachable(self, registration_id: str) -> None:
        """Finalizer callback; runs on whichever thread dropped the last reference"""
        with self._lock:
            if self._accepting:
                self._pending_count += 1
                self._pending.put(registration_id)
                return

        # No reclamation thread any more, run inline
        self._consume(registration_id, ReleaseTrigger.RECLAIMED)

    def _consume(self, registration_id: str, trigger: ReleaseTrigger) -> bool:
        """Remove a registration from the active set and run its action"""
        with self._lock:
            registration = self._registrations.pop(registration_id, None)
            if registration is None:
                return False

            registration.state = RegistrationState.RELEASED
            registration.trigger = trigger
            registration.released_at = datetime.now()

            if trigger is ReleaseTrigger.EXPLICIT:
                self._total_explicit += 1
            else:
                self._total_reclaimed += 1

        if registration._finalizer is not None:
            registration._finalizer.detach()

        self._run_action(registration, trigger)
        return True

    def _run_action(self, registration: Registration, trigger: ReleaseTrigger) -> None:
        """Run a consumed registration's action, reporting failures"""
        action, registration._action = registration._action, None
        try:
            action()
        except Exception as e:
            with self._lock:
                self._total_failed += 1

            error = CleanupActionError(
                f"Cleanup action for {registration.description} raised "
                f"{type(e).__name__}: {e}",
                registration_id=registration.registration_id,
                trigger=trigger.value
            )
            self._handle_error(error, {'method': '_run_action'})
            self.signals.cleanup_failed.emit(registration.registration_id, str(e))
        else:
            self.logger.debug(
                f"Cleanup {registration.registration_id} ran ({trigger.value})"
            )
            self.signals.cleanup_completed.emit(registration.registration_id, trigger.value)

    def _reclamation_loop(self) -> None:
        """Background loop running actions for collected resources"""
        while True:
            registration_id = self._pending.get()
            if registration_id is None:
                break

            try:
                self._consume(registration_id, ReleaseTrigger.RECLAIMED)
            except Exception as e:
                self.logger.exception(f"Reclamation of {registration_id} failed: {e}")
            finally:
                with self._pending_cond:
                    self._pending_count -= 1
                    if self._pending_count == 0:
                        self._pending_cond.notify_all()

    def _emergency_cleanup(self) -> None:
        """Drain queued cleanups on application shutdown"""
        try:
            self.shutdown(wait=True)
        except Exception as e:
            self.logger.critical(f"Emergency cleanup failed: {e}")
