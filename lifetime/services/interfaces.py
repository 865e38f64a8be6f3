#!/usr/bin/env python3
"""
Service interfaces for dependency injection and testing
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional
from enum import Enum


class RegistrationState(Enum):
    """Lifecycle states for a cleanup registration"""
    ACTIVE = "active"
    RELEASED = "released"


class ReleaseTrigger(Enum):
    """What consumed a cleanup registration"""
    EXPLICIT = "explicit"
    RECLAIMED = "reclaimed"


class IService(ABC):
    """Base interface for all services"""
    pass


class ICleanupCoordinator(IService):
    """Interface for the coordinator that runs post-collection cleanup actions"""

    @abstractmethod
    def register(self, resource: Any, action: Callable[[], None],
                 description: Optional[str] = None) -> Any:
        """
        Register a cleanup action for a resource

        The coordinator must not keep the resource reachable: only the
        resource's identity is recorded.

        Args:
            resource: The object whose unreachability triggers the action
            action: Zero-argument callable holding no reference to resource
            description: Optional label used in logs

        Returns:
            Registration handle used for explicit release
        """
        pass

    @abstractmethod
    def release(self, registration: Any,
                trigger: ReleaseTrigger = ReleaseTrigger.EXPLICIT) -> bool:
        """
        Run a registration's action exactly once and discard it

        Args:
            registration: Handle returned by register()
            trigger: Who is consuming the registration

        Returns:
            True if this call ran the action, False if already consumed
        """
        pass

    @abstractmethod
    def request_reclamation(self) -> int:
        """
        Ask the runtime for a collection pass (advisory)

        Returns:
            Number of unreachable objects the collector found
        """
        pass

    @abstractmethod
    def wait_for_pending(self, timeout: Optional[float] = None) -> bool:
        """
        Block until queued reclamation cleanups have run

        Args:
            timeout: Seconds to wait, None to wait indefinitely

        Returns:
            True if the queue drained within the timeout
        """
        pass

    @abstractmethod
    def active_count(self) -> int:
        """Number of registrations not yet consumed"""
        pass

    @abstractmethod
    def get_statistics(self) -> Dict[str, Any]:
        """
        Get coordinator statistics

        Returns:
            Dictionary of registration and cleanup counters
        """
        pass

    @abstractmethod
    def shutdown(self, wait: bool = True) -> None:
        """
        Stop the reclamation thread

        Args:
            wait: Whether to drain queued cleanups before returning
        """
        pass
