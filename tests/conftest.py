from __future__ import annotations

from typing import Dict, List, Optional, Set, Tuple

import pytest

from collectors.sources import Sources
from core.errors import Unavailable
from core.outcome import Outcome
from core.readings import CpuTimes, DiskCounters, Filesystem, MemoryInfo, NetCounters


class Clock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


class StubMemInfo:
    def __init__(self) -> None:
        self.info: Optional[MemoryInfo] = MemoryInfo(available_kb=1024, total_kb=4096)

    def read(self) -> MemoryInfo:
        if self.info is None:
            raise Unavailable("Available memory not found")
        return self.info


class StubUptime:
    def __init__(self) -> None:
        self.times: Optional[CpuTimes] = CpuTimes(uptime=100.0, idle=350.0)

    def read(self) -> CpuTimes:
        if self.times is None:
            raise Unavailable("Uptime not found")
        return self.times


class StubFilesystems:
    def __init__(self) -> None:
        self.filesystems: List[Filesystem] = [Filesystem("/dev/sda1", "/", 1000, 400)]

    def read(self) -> List[Filesystem]:
        return list(self.filesystems)


class StubNetDevices:
    def __init__(self) -> None:
        self.counters: Dict[str, NetCounters] = {}
        self.fail = False

    def set(self, device: str, received: int, sent: int) -> None:
        self.counters[device] = NetCounters(bytes_received=received, bytes_sent=sent)

    def read(self) -> Dict[str, NetCounters]:
        if self.fail:
            raise Unavailable("/proc/net/dev: No such file or directory")
        return dict(self.counters)


class StubNetUp:
    def __init__(self) -> None:
        self.up: Set[str] = set()

    def read(self) -> Set[str]:
        return set(self.up)


class StubSectorSizes:
    def __init__(self) -> None:
        self.sizes: Dict[str, int] = {}
        self.calls: List[Tuple[str, ...]] = []

    def read(self, *devices: str) -> Dict[str, int]:
        self.calls.append(devices)
        if not devices:
            return dict(self.sizes)
        return {d: s for d, s in self.sizes.items() if d in devices}


class StubBlockStat:
    def __init__(self) -> None:
        self.counters: Dict[str, DiskCounters] = {}

    def set(self, device: str, reads: int, read_sectors: int = 0, writes: int = 0, write_sectors: int = 0) -> None:
        self.counters[device] = DiskCounters(reads, read_sectors, writes, write_sectors)

    def read(self, device: str) -> DiskCounters:
        if device not in self.counters:
            raise Unavailable(f"/sys/class/block/{device}/stat: No such file or directory")
        return self.counters[device]


class StubCpuListing:
    def __init__(self) -> None:
        self.count: Outcome[int] = Outcome.ok(4)
        self.is_64_bit = False

    def read(self) -> Tuple[Outcome[int], bool]:
        return self.count, self.is_64_bit


class StubAgentIds:
    def __init__(self) -> None:
        self.ids: List[str] = ["3d7e2a90-1c4b-4f7e-9a1d-2b6c8e0f5a11"]

    def read(self) -> List[str]:
        return list(self.ids)


@pytest.fixture()
def clock() -> Clock:
    return Clock()


@pytest.fixture()
def sources() -> Sources:
    return Sources(
        meminfo=StubMemInfo(),
        uptime=StubUptime(),
        filesystems=StubFilesystems(),
        net_devices=StubNetDevices(),
        net_up=StubNetUp(),
        sector_sizes=StubSectorSizes(),
        block_stat=StubBlockStat(),
        cpu_listing=StubCpuListing(),
        agent_ids=StubAgentIds(),
    )
