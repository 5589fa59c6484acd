"""
Baseline/diff orchestration.

baseline() must run before any sampling call. It fixes the counter width,
captures a first reading for every visible network interface and disk, and
returns the uptime/idle snapshot. Each later sample diffs the fresh reading
against the immediately preceding one and stores the fresh reading for the
next interval.

Not thread-safe: one call at a time per instance.
"""

from __future__ import annotations
import logging
from typing import Callable, List, Optional, Union

from collectors.sources import Sources
from core.baseline_store import BaselineStore, Domain
from core.counters import CounterWidthPolicy
from core.diff import diff_cpu, diff_disk, diff_net
from core.errors import CollectorError, NotBaselined, Unavailable
from core.inclusion import include_net
from core.inventory import DeviceInventory
from core.outcome import Outcome
from core.readings import (
    CpuDelta,
    CpuTimes,
    DiskDelta,
    Filesystem,
    MemoryInfo,
    NetDelta,
    RawDiskReading,
    RawNetReading,
)
from core.util import now_ts, strip_dev_prefix

NetStat = Union[NetDelta, RawNetReading]

NOT_CALLED = "baseline has not been called"

logger = logging.getLogger(__name__)


class Sampler:
    def __init__(
        self,
        sources: Optional[Sources] = None,
        root: str = "/",
        clock: Callable[[], float] = now_ts,
    ) -> None:
        """
        Args:
            sources: Data sources; defaults to the live collectors under root
            root: Filesystem root the default collectors read from
            clock: Timestamp source for raw readings
        """
        self.sources = sources if sources is not None else Sources.for_root(root)
        self.clock = clock
        self.policy = CounterWidthPolicy()
        self.store = BaselineStore()
        self.inventory = DeviceInventory(self.sources.sector_sizes)
        self._baseline_reason: Optional[str] = NOT_CALLED
        self._cpu_count: Outcome[int] = Outcome.failed(NOT_CALLED)
        self._agent_ids: List[str] = []

    @property
    def is_baselined(self) -> bool:
        return self._baseline_reason is None

    def baseline(self) -> CpuTimes:
        """
        Reset every store and take first readings.

        Safe to call again; later samples diff against the newest baseline.
        A CPU count that cannot be resolved does not fail the baseline, it is
        raised later from get_number_of_cpus().

        Returns:
            Uptime and idle seconds at baseline time

        Raises:
            Unavailable: The uptime source failed (the sampler is still
                baselined)
        """
        try:
            self._agent_ids = self._load_agent_ids()
            self._cpu_count, is_64_bit = self.sources.cpu_listing.read()
            if not self._cpu_count.is_ok:
                logger.warning("CPU count unavailable", extra={"reason": self._cpu_count.error})
            self.policy.set_width(is_64_bit)
            for domain in Domain:
                self.store.reset(domain)
            self._baseline_net()
            self._baseline_disks()
        except CollectorError as e:
            self._baseline_reason = f"baseline failed: {e}"
            raise
        self._baseline_reason = None
        logger.info("Baseline established with %d-bit counters", self.policy.bits)
        return self.get_cpu_idle()

    def _require_baseline(self) -> None:
        if self._baseline_reason is not None:
            raise NotBaselined(self._baseline_reason)

    def _load_agent_ids(self) -> List[str]:
        try:
            return self.sources.agent_ids.read()
        except OSError as e:
            logger.warning("Agent ids unreadable", extra={"reason": str(e)})
            return []

    def _baseline_net(self) -> None:
        try:
            readings = self._read_net()
        except Unavailable as e:
            logger.warning("Network baseline skipped", extra={"domain": Domain.NET.value, "reason": e.reason})
            return
        for reading in readings:
            self.store.set(Domain.NET, reading.device, reading)

    def _baseline_disks(self) -> None:
        for device, sector_size in self.inventory.resolve_all().items():
            try:
                counters = self.sources.block_stat.read(device)
            except Unavailable as e:
                logger.debug("Disk baseline skipped", extra={"device": device, "reason": e.reason})
                continue
            reading = RawDiskReading.from_counters(device, self.clock(), counters, sector_size)
            self.store.set(Domain.DISK, device, reading)

    def _read_net(self) -> List[RawNetReading]:
        counters = self.sources.net_devices.read()
        up = self.sources.net_up.read()
        now = self.clock()
        return [
            RawNetReading(device, now, device in up, c.bytes_received, c.bytes_sent)
            for device, c in counters.items()
        ]

    def get_agent_ids(self) -> List[str]:
        self._require_baseline()
        if not self._agent_ids:
            raise Unavailable("no agent ids found")
        return list(self._agent_ids)

    def get_number_of_cpus(self) -> int:
        """
        Number of CPUs available for scheduling, as found by the last baseline.

        Raises:
            NotBaselined: baseline() has not succeeded
            Unavailable: The count could not be determined during baseline
        """
        self._require_baseline()
        return self._cpu_count.unwrap()

    def get_available_memory_kb(self) -> MemoryInfo:
        return self.sources.meminfo.read()

    def get_cpu_idle(self) -> CpuTimes:
        return self.sources.uptime.read()

    def get_filesystems(self) -> List[Filesystem]:
        self._require_baseline()
        return self.sources.filesystems.read()

    def get_net_stats(self) -> List[NetStat]:
        """
        Traffic per interface since the previous call or baseline.

        An interface is listed if it is up, or if it moved traffic since its
        previous reading. A newly seen interface is listed as its raw reading,
        and only when up.

        Raises:
            NotBaselined: baseline() has not succeeded
            Unavailable: The interface counters could not be read
        """
        self._require_baseline()
        result: List[NetStat] = []
        for current in self._read_net():
            previous = self.store.get_and_replace(Domain.NET, current.device, current)
            delta = None if previous is None else diff_net(current, previous, self.policy)
            if include_net(current, delta):
                result.append(current if delta is None else delta)
        return result

    def get_disk_stats(self, device: str) -> DiskDelta:
        """
        I/O on one disk since the previous call or baseline.

        Args:
            device: 'sda' or '/dev/sda'

        Raises:
            NotBaselined: baseline() has not succeeded
            Unavailable: "no data for <dev>" when the device cannot be read
                (the stored reading is kept), or "no previous data for <dev>"
                on the first reading of a device (which is stored)
        """
        self._require_baseline()
        dev = strip_dev_prefix(device)
        sector_size = self.inventory.resolve(dev)
        try:
            counters = self.sources.block_stat.read(dev)
        except Unavailable as e:
            logger.debug("Disk read failed", extra={"device": dev, "reason": e.reason})
            raise Unavailable(f"no data for {dev}") from e
        current = RawDiskReading.from_counters(dev, self.clock(), counters, sector_size)
        previous = self.store.get_and_replace(Domain.DISK, dev, current)
        if previous is None:
            raise Unavailable(f"no previous data for {dev}")
        return diff_disk(current, previous, self.policy)

    def sample_cpu(self) -> CpuDelta:
        """
        Uptime and idle seconds since the previous sample_cpu() call.

        The baseline snapshot is returned to the caller of baseline() and not
        kept, so the first call after a baseline has nothing to diff against.
        """
        self._require_baseline()
        current = self.get_cpu_idle()
        previous = self.store.get_and_replace(Domain.CPU, None, current)
        if previous is None:
            raise Unavailable("no previous data for cpu")
        return diff_cpu(current, previous)

    def sample(self, domain: Domain, device: Optional[str] = None) -> Union[DiskDelta, List[NetStat], CpuDelta]:
        if domain is Domain.DISK:
            if device is None:
                raise ValueError("disk sampling needs a device")
            return self.get_disk_stats(device)
        if domain is Domain.NET:
            return self.get_net_stats()
        return self.sample_cpu()
