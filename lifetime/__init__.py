"""
Lifetime-tracked resources with post-collection cleanup

Demonstrates heap and stack lifetimes: a TrackedResource registers a cleanup
action that runs exactly once, either when the holder releases it or after
the resource has been collected.
"""

from .tracked_resource import TrackedResource, CleanupTask
from .services.cleanup_coordinator import CleanupCoordinator, Registration
from .services.service_config import get_default_coordinator
from .resource_coordinators import ResourceScope

__version__ = "1.0.0"

__all__ = [
    'TrackedResource', 'CleanupTask',
    'CleanupCoordinator', 'Registration', 'get_default_coordinator',
    'ResourceScope',
]
