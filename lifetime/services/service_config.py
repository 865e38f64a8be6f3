#!/usr/bin/env python3
"""
Service configuration and registration
"""
import logging
import threading

from .service_registry import get_registry, register_service
from .interfaces import ICleanupCoordinator
from .cleanup_coordinator import CleanupCoordinator

logger = logging.getLogger("ServiceConfiguration")

_configure_lock = threading.Lock()


def configure_services():
    """Configure and register all services"""
    try:
        register_service(ICleanupCoordinator, CleanupCoordinator())
        logger.debug("All services configured successfully")
    except Exception as e:
        logger.error(f"Service configuration failed: {e}")
        raise


def get_configured_services():
    """Get list of all configured service interfaces for debugging"""
    return [ICleanupCoordinator]


def get_default_coordinator() -> ICleanupCoordinator:
    """
    The process-wide cleanup coordinator, configured on first use

    Callers that need isolation (tests, embedded use) should construct their
    own CleanupCoordinator and pass it explicitly instead.
    """
    registry = get_registry()
    with _configure_lock:
        if not registry.has_service(ICleanupCoordinator):
            configure_services()
        return registry.get_service(ICleanupCoordinator)


def verify_service_configuration():
    """Verify all services are properly configured (for testing/debugging)"""
    registry = get_registry()

    results = {}
    for service_interface in get_configured_services():
        try:
            service = registry.get_service(service_interface)
            results[service_interface.__name__] = {
                'configured': True,
                'instance': service.__class__.__name__,
                'error': None
            }
        except ValueError as e:
            results[service_interface.__name__] = {
                'configured': False,
                'instance': None,
                'error': str(e)
            }
    return results
