"""
Resource coordinator infrastructure for managing resource lifecycles.

Provides scopes that release tracked resources deterministically instead of
waiting for the collector.
"""

from .scope_coordinator import ResourceScope

__all__ = [
    'ResourceScope',
]
