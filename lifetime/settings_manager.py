#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Centralized settings management for the demonstrations

Read-only: values missing from the store fall back to DEFAULTS and nothing
is written back.
"""

from typing import Any
from PySide6.QtCore import QSettings


class SettingsManager:
    """Centralized settings management"""

    # Canonical keys for all settings
    KEYS = {
        # Demo scenarios
        'SINGLE_PAYLOAD': 'demo.single_payload',
        'BATCH_SIZE': 'demo.batch_size',
        'CLEANUP_WAIT_MS': 'demo.cleanup_wait_ms',

        # Debug settings
        'DEBUG_LOGGING': 'debug.enable_logging',
    }

    DEFAULTS = {
        'SINGLE_PAYLOAD': 23,
        'BATCH_SIZE': 100000,
        'CLEANUP_WAIT_MS': 1000,
        'DEBUG_LOGGING': False,
    }

    _instance = None

    def __new__(cls):
        """Singleton pattern for settings manager"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize settings manager"""
        if self._initialized:
            return

        self._initialized = True
        self._settings = QSettings('LifetimeDemo', 'Settings')

    def get(self, key: str, default: Any = None) -> Any:
        """Get setting value

        Args:
            key: Either a KEYS constant or direct key string
            default: Default value if key not found
        """
        canonical_key = self.KEYS.get(key, key)
        return self._settings.value(canonical_key, default)

    def _get_int(self, name: str) -> int:
        """Read an integer setting, falling back to the default on junk values"""
        try:
            return int(self.get(name, self.DEFAULTS[name]))
        except (TypeError, ValueError):
            return self.DEFAULTS[name]

    @property
    def single_payload(self) -> int:
        """Payload of the resource created in the single-scope scenario"""
        return self._get_int('SINGLE_PAYLOAD')

    @property
    def batch_size(self) -> int:
        """Number of resources created in the batch scenario (0 skips the batch)"""
        return max(self._get_int('BATCH_SIZE'), 0)

    @property
    def cleanup_wait_ms(self) -> int:
        """Pause given to background cleanup after a reclamation request"""
        return max(self._get_int('CLEANUP_WAIT_MS'), 0)

    @property
    def debug_logging(self) -> bool:
        """Whether debug logging is enabled"""
        value = self.get('DEBUG_LOGGING', False)
        # INI backends hand booleans back as strings
        if isinstance(value, str):
            return value.strip().lower() in ('true', '1', 'yes')
        return bool(value)


# Global settings instance
settings = SettingsManager()
