#!/usr/bin/env python3
"""
Service layer for the lifetime demonstrations

- Dependency injection through the service registry
- Cleanup coordinator running post-collection cleanup actions
"""

from .service_registry import (
    ServiceRegistry, get_registry, get_service, register_service, register_factory
)
from .interfaces import (
    IService, ICleanupCoordinator, RegistrationState, ReleaseTrigger
)
from .base_service import BaseService
from .cleanup_coordinator import CleanupCoordinator, Registration, CoordinatorSignals
from .service_config import (
    configure_services, get_default_coordinator, verify_service_configuration
)

__all__ = [
    'ServiceRegistry', 'get_registry', 'get_service', 'register_service', 'register_factory',
    'IService', 'ICleanupCoordinator', 'RegistrationState', 'ReleaseTrigger',
    'BaseService',
    'CleanupCoordinator', 'Registration', 'CoordinatorSignals',
    'configure_services', 'get_default_coordinator', 'verify_service_configuration'
]
