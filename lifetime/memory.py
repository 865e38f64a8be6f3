#!/usr/bin/env python3
"""
Process memory sampling for the before/after reclamation reports
"""

from dataclasses import dataclass, field
from datetime import datetime
import os

import psutil


@dataclass(frozen=True)
class MemorySample:
    """One reading of the current process's memory"""
    rss_bytes: int
    vms_bytes: int
    taken_at: datetime = field(default_factory=datetime.now)

    @property
    def used_bytes(self) -> int:
        """
        Resident set size, standing in for "allocated minus free" heap

        CPython does not expose a free-heap figure, so the report uses what
        the process holds in physical memory.
        """
        return self.rss_bytes

    def delta(self, other: 'MemorySample') -> int:
        """Signed change in used bytes from other to self"""
        return self.used_bytes - other.used_bytes


def sample_memory(pid: int = None) -> MemorySample:
    """
    Sample memory usage of a process

    Args:
        pid: Process to sample (current process if None)

    Returns:
        MemorySample with resident and virtual sizes
    """
    info = psutil.Process(pid or os.getpid()).memory_info()
    return MemorySample(rss_bytes=int(info.rss), vms_bytes=int(info.vms))


def format_bytes(size_bytes: int) -> str:
    """
    Format a byte count in human-readable form

    Negative values (deltas) keep their sign.
    """
    sign = "-" if size_bytes < 0 else ""
    size = float(abs(size_bytes))

    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024.0:
            if unit == 'B':
                return f"{sign}{int(size)} {unit}"
            return f"{sign}{size:.2f} {unit}"
        size /= 1024.0

    return f"{sign}{size:.2f} PB"
