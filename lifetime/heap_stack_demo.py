#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Heap vs. stack demonstration

Names live in frames on the call stack, the objects they point at live on
the heap. Once the last name for a TrackedResource goes away its cleanup
runs on the coordinator's background thread, with no ordering guarantee
relative to whatever the main thread does next.

Two scenarios:
- a single resource created inside one function call
- a large batch held in a growing list and then dropped at once, with
  process memory sampled before and after reclamation
"""

import sys
import time
from dataclasses import dataclass
from typing import List, Optional

from .exceptions import CleanupWaitInterrupted, ConfigurationError, LifetimeError
from .logger import logger
from .memory import MemorySample, format_bytes, sample_memory
from .services.interfaces import ICleanupCoordinator
from .services.service_config import get_default_coordinator
from .settings_manager import SettingsManager
from .tracked_resource import Notify, TrackedResource


@dataclass
class DemoConfig:
    """Scenario parameters"""
    single_payload: int = 23
    batch_size: int = 100000
    cleanup_wait_ms: int = 1000
    debug_logging: bool = False

    def __post_init__(self):
        if self.batch_size < 0:
            raise ConfigurationError(
                f"Batch size must not be negative: {self.batch_size}",
                setting_key='demo.batch_size'
            )
        if self.cleanup_wait_ms < 0:
            raise ConfigurationError(
                f"Cleanup wait must not be negative: {self.cleanup_wait_ms}",
                setting_key='demo.cleanup_wait_ms'
            )

    @classmethod
    def from_settings(cls, settings: Optional[SettingsManager] = None) -> 'DemoConfig':
        settings = settings or SettingsManager()
        return cls(
            single_payload=settings.single_payload,
            batch_size=settings.batch_size,
            cleanup_wait_ms=settings.cleanup_wait_ms,
            debug_logging=settings.debug_logging,
        )


@dataclass
class BatchReport:
    """Outcome of the batch scenario"""
    created: int
    memory_before: MemorySample
    memory_after: MemorySample
    collected: int


def scoped_method(coordinator: ICleanupCoordinator, payload: int = 23,
                  notify: Optional[Notify] = None) -> None:
    """Create a resource whose only reference is a local of this frame"""
    notify = notify or logger.info

    obj = TrackedResource(payload, coordinator, notify)
    notify(f"Inside method: Object value = {obj.value}")
    # obj is unreachable as soon as this frame is popped


def pause_for_cleanup(wait_ms: int) -> None:
    """
    Give background cleanup a window to run

    Best effort only: nothing guarantees pending actions finish in time.

    Raises:
        CleanupWaitInterrupted: if the wait is interrupted
    """
    try:
        time.sleep(wait_ms / 1000.0)
    except KeyboardInterrupt as e:
        raise CleanupWaitInterrupted(waited_ms=wait_ms) from e


def run_single_scope_demo(config: DemoConfig, coordinator: ICleanupCoordinator,
                          notify: Optional[Notify] = None) -> None:
    """Single short-lived resource scoped to one call"""
    notify = notify or logger.info

    scoped_method(coordinator, config.single_payload, notify)

    notify("Requesting garbage collection...")
    coordinator.request_reclamation()
    pause_for_cleanup(config.cleanup_wait_ms)


def run_batch_demo(config: DemoConfig, coordinator: ICleanupCoordinator,
                   notify: Optional[Notify] = None) -> BatchReport:
    """Large batch held in a growing list, then dropped en masse"""
    notify = notify or logger.info

    resources: List[TrackedResource] = []
    for payload in range(config.batch_size):
        resources.append(TrackedResource(payload, coordinator, notify))

    created = len(resources)
    memory_before = sample_memory()
    notify(f"Memory used before reclamation: {memory_before.used_bytes} bytes "
           f"({format_bytes(memory_before.used_bytes)}) holding {created} objects")

    del resources

    notify("Requesting garbage collection...")
    collected = coordinator.request_reclamation()
    pause_for_cleanup(config.cleanup_wait_ms)

    memory_after = sample_memory()
    notify(f"Memory used after reclamation: {memory_after.used_bytes} bytes "
           f"({format_bytes(memory_after.used_bytes)}), "
           f"change {format_bytes(memory_after.delta(memory_before))}")

    return BatchReport(
        created=created,
        memory_before=memory_before,
        memory_after=memory_after,
        collected=collected,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run both scenarios

    Errors are reported and swallowed here, so the exit status is always 0.

    Args:
        argv: Command line arguments (unused)
    """
    try:
        config = DemoConfig.from_settings()
        if config.debug_logging:
            logger.enable_debug(True)

        coordinator = get_default_coordinator()

        run_single_scope_demo(config, coordinator)
        report = run_batch_demo(config, coordinator)
        logger.debug(f"Batch scenario: {report.created} created, "
                     f"{report.collected} collected by the cycle collector")
        logger.debug(f"Coordinator statistics: {coordinator.get_statistics()}")

        logger.info("End of Main method")
    except LifetimeError as e:
        logger.error(f"An error occurred: {e.message}")
    except Exception as e:
        logger.error(f"An error occurred: {e}")

    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
