"""
Per-domain differencing of raw readings.

Counter fields go through wraparound-safe subtraction using the active
counter width; timestamps are subtracted directly.
"""

from __future__ import annotations
from typing import Optional

from core.counters import CounterWidthPolicy
from core.errors import PreconditionViolation
from core.readings import CpuDelta, CpuTimes, DiskDelta, NetDelta, RawDiskReading, RawNetReading


def _check_same_device(current_device: str, previous_device: str) -> None:
    if current_device != previous_device:
        raise PreconditionViolation(f"{current_device} != {previous_device}")


def _bytes(sectors: int, sector_size: Optional[int]) -> Optional[int]:
    return None if sector_size is None else sectors * sector_size


def diff_disk(current: RawDiskReading, previous: RawDiskReading, policy: CounterWidthPolicy) -> DiskDelta:
    """
    Disk activity between two readings of the same device.

    Sector counts are converted to bytes using the current reading's sector
    size; when that is unknown the byte fields are None.

    Raises:
        PreconditionViolation: devices differ or the counter width is unknown
    """
    _check_same_device(current.device, previous.device)
    return DiskDelta(
        device=current.device,
        delta_time=current.time - previous.time,
        reads=policy.subtract(current.reads, previous.reads),
        bytes_read=_bytes(policy.subtract(current.read_sectors, previous.read_sectors), current.sector_size),
        writes=policy.subtract(current.writes, previous.writes),
        bytes_written=_bytes(policy.subtract(current.write_sectors, previous.write_sectors), current.sector_size),
    )


def diff_net(current: RawNetReading, previous: RawNetReading, policy: CounterWidthPolicy) -> NetDelta:
    """
    Bytes received and sent between two readings of the same interface.

    Raises:
        PreconditionViolation: devices differ or the counter width is unknown
    """
    _check_same_device(current.device, previous.device)
    return NetDelta(
        device=current.device,
        delta_time=current.time - previous.time,
        bytes_received=policy.subtract(current.bytes_received, previous.bytes_received),
        bytes_sent=policy.subtract(current.bytes_sent, previous.bytes_sent),
    )


def is_active(delta: NetDelta) -> bool:
    return delta.is_active()


def diff_cpu(current: CpuTimes, previous: CpuTimes) -> CpuDelta:
    # Seconds since boot; these never wrap.
    return CpuDelta(uptime=current.uptime - previous.uptime, idle=current.idle - previous.idle)
