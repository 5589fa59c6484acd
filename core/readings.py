"""
Raw readings and the delta records computed from them.

Raw readings are immutable snapshots of monotonically increasing counters,
stamped with the time they were taken. Deltas are produced fresh on every
diff and carry nothing beyond their values.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

DEV_PREFIX = "/dev/"


@dataclass(frozen=True)
class DiskCounters:
    """Cumulative counters from /sys/class/block/<dev>/stat."""

    reads: int
    read_sectors: int
    writes: int
    write_sectors: int


@dataclass(frozen=True)
class RawDiskReading:
    device: str
    time: float
    reads: int
    read_sectors: int
    writes: int
    write_sectors: int
    sector_size: Optional[int] = None

    @classmethod
    def from_counters(
        cls, device: str, time: float, counters: DiskCounters, sector_size: Optional[int]
    ) -> "RawDiskReading":
        return cls(
            device=device,
            time=time,
            reads=counters.reads,
            read_sectors=counters.read_sectors,
            writes=counters.writes,
            write_sectors=counters.write_sectors,
            sector_size=sector_size,
        )


@dataclass(frozen=True)
class DiskDelta:
    """
    Disk activity over one interval.

    bytes_read and bytes_written are None when the device's sector size is
    unknown; the operation counts are still reported.
    """

    device: str
    delta_time: float
    reads: int
    bytes_read: Optional[int]
    writes: int
    bytes_written: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class NetCounters:
    bytes_received: int
    bytes_sent: int


@dataclass(frozen=True)
class RawNetReading:
    device: str
    time: float
    up: bool
    bytes_received: int
    bytes_sent: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "device": self.device,
            "bytes_received": self.bytes_received,
            "bytes_sent": self.bytes_sent,
            "up": self.up,
        }


@dataclass(frozen=True)
class NetDelta:
    device: str
    delta_time: float
    bytes_received: int
    bytes_sent: int

    def is_active(self) -> bool:
        return self.bytes_received > 0 or self.bytes_sent > 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CpuTimes:
    """Seconds since boot, and cumulative idle seconds across all CPUs."""

    uptime: float
    idle: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CpuDelta:
    uptime: float
    idle: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MemoryInfo:
    available_kb: int
    total_kb: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, order=True)
class Filesystem:
    """A mounted filesystem. Instances sort by device, mount point, size, free."""

    device_name: str
    mount_point: str
    size_in_bytes: int
    free_space_in_bytes: int

    @classmethod
    def from_row(
        cls, device_name: str, mount_point: str, size_in_bytes: str, free_space_in_bytes: str
    ) -> "Filesystem":
        """
        Validate one listing row.

        Raises:
            ValueError: device is not under /dev/, mount point is not absolute,
                size is zero, or either number is not a base-10 integer
        """
        if not device_name.startswith(DEV_PREFIX):
            raise ValueError(device_name)
        if not mount_point.startswith("/"):
            raise ValueError(mount_point)
        size = int(size_in_bytes, 10)
        if size == 0:
            raise ValueError(size_in_bytes)
        free = int(free_space_in_bytes, 10)
        return cls(device_name, mount_point, size, free)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
