"""
Scope coordinator for deterministic release of tracked resources.

Holds resources by weak reference only, so a scope never keeps anything
alive. Closing the scope releases every resource that is still live;
resources that died earlier were already cleaned by the coordinator.
"""

import logging
import weakref
from typing import Dict, Optional

from lifetime.tracked_resource import TrackedResource

logger = logging.getLogger(__name__)


class ResourceScope:
    """
    Scoped acquisition with guaranteed release.

    Usage:
        with ResourceScope("batch") as scope:
            for i in range(10):
                scope.track(TrackedResource(i))
    """

    def __init__(self, scope_id: str):
        """
        Initialize the scope.

        Args:
            scope_id: Identifier used in log messages
        """
        self._scope_id = scope_id
        self._resources: Dict[str, weakref.ref] = {}
        self._next_id = 0
        self._closed = False
        self.debug_mode = False  # Can be enabled for debugging

    @property
    def scope_id(self) -> str:
        return self._scope_id

    @property
    def closed(self) -> bool:
        return self._closed

    def track(self, resource: TrackedResource, name: Optional[str] = None) -> str:
        """
        Track a resource for release when the scope closes.

        Args:
            resource: The resource to track
            name: Optional name used as part of the resource ID

        Returns:
            Resource ID for tracking
        """
        if self._closed:
            raise RuntimeError(f"Scope {self._scope_id} is closed")

        resource_id = f"{self._scope_id}:{name or resource.value}:{self._next_id}"
        self._next_id += 1
        self._resources[resource_id] = weakref.ref(resource)

        if self.debug_mode:
            logger.debug(f"Scope {self._scope_id} tracking {resource_id}")

        return resource_id

    def release(self, resource_id: str) -> bool:
        """
        Release a specific resource if it is still alive.

        Args:
            resource_id: The resource ID to release

        Returns:
            True if the resource's cleanup ran because of this call
        """
        resource_ref = self._resources.pop(resource_id, None)
        if resource_ref is None:
            return False

        if self.debug_mode:
            logger.debug(f"Releasing resource {resource_id} from {self._scope_id}")

        resource = resource_ref()
        released = resource.release() if resource is not None else False

        self.on_resource_released(resource_id)
        return released

    def on_resource_released(self, resource_id: str):
        """
        Hook called when a resource is released.
        Can be overridden by subclasses for custom behavior.

        Args:
            resource_id: The resource being released
        """
        pass  # Override in subclasses if needed

    def cleanup_all(self) -> int:
        """
        Release all tracked resources.

        Returns:
            Number of cleanups run by this call
        """
        released = 0
        for resource_id in list(self._resources.keys()):
            try:
                if self.release(resource_id):
                    released += 1
            except Exception as e:
                logger.error(f"Error releasing resource {resource_id}: {e}")

        self._resources.clear()
        return released

    def close(self) -> int:
        """Release everything and refuse further tracking"""
        released = self.cleanup_all()
        self._closed = True
        logger.debug(f"Scope {self._scope_id} closed, {released} resources released")
        return released

    def get_resource_count(self) -> int:
        """
        Get the count of tracked resources that are still alive.

        Returns:
            Number of live tracked resources
        """
        dead_refs = [rid for rid, ref in self._resources.items() if ref() is None]
        for rid in dead_refs:
            del self._resources[rid]

        return len(self._resources)

    def __enter__(self) -> 'ResourceScope':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __del__(self):
        """
        Safety check on destruction to warn about unreleased resources.
        """
        if getattr(self, '_closed', True):
            return

        if self.get_resource_count():
            logger.warning(
                f"Scope {self._scope_id} destroyed with "
                f"{len(self._resources)} live resources"
            )
            try:
                self.cleanup_all()
            except Exception as e:
                logger.error(f"Error during scope cleanup: {e}")
