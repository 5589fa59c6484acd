from __future__ import annotations

import pytest

from core.baseline_store import Domain
from core.errors import NotBaselined, Unavailable
from core.outcome import Outcome
from core.readings import CpuDelta, CpuTimes, DiskDelta, NetDelta, RawNetReading
from core.sampler import Sampler


def _sampler(sources, clock) -> Sampler:
    return Sampler(sources=sources, clock=clock)


def test_operations_require_baseline(sources, clock) -> None:
    sampler = _sampler(sources, clock)

    for call in (
        sampler.get_net_stats,
        sampler.get_number_of_cpus,
        sampler.get_filesystems,
        sampler.get_agent_ids,
        sampler.sample_cpu,
        lambda: sampler.get_disk_stats("sda"),
    ):
        with pytest.raises(NotBaselined, match="baseline has not been called"):
            call()
    assert sampler.is_baselined is False


def test_stateless_reads_do_not_require_baseline(sources, clock) -> None:
    sampler = _sampler(sources, clock)

    assert sampler.get_available_memory_kb().total_kb == 4096
    assert sampler.get_cpu_idle() == CpuTimes(uptime=100.0, idle=350.0)


def test_baseline_returns_cpu_snapshot_and_sets_width(sources, clock) -> None:
    sources.cpu_listing.is_64_bit = True
    sampler = _sampler(sources, clock)

    snapshot = sampler.baseline()

    assert snapshot == CpuTimes(uptime=100.0, idle=350.0)
    assert sampler.is_baselined
    assert sampler.policy.bits == 64
    assert sampler.get_number_of_cpus() == 4
    assert sampler.get_agent_ids() == ["3d7e2a90-1c4b-4f7e-9a1d-2b6c8e0f5a11"]


def test_disk_end_to_end_with_wraparound(sources, clock) -> None:
    sources.sector_sizes.sizes["sda"] = 512
    sources.block_stat.set("sda", reads=100)
    sampler = _sampler(sources, clock)
    sampler.baseline()

    clock.now = 10.0
    sources.block_stat.set("sda", reads=150)
    first = sampler.get_disk_stats("sda")

    assert first.reads == 50
    assert first.delta_time == 10.0

    clock.now = 20.0
    sources.block_stat.set("sda", reads=40)
    second = sampler.get_disk_stats("sda")

    assert second.reads == (2 ** 32 + 40 - 150) % 2 ** 32
    assert second.delta_time == 10.0


def test_disk_bytes_use_sector_size(sources, clock) -> None:
    sources.sector_sizes.sizes["sda"] = 4096
    sources.block_stat.set("sda", reads=1, read_sectors=10, writes=1, write_sectors=20)
    sampler = _sampler(sources, clock)
    sampler.baseline()

    sources.block_stat.set("sda", reads=3, read_sectors=18, writes=2, write_sectors=21)
    delta = sampler.get_disk_stats("/dev/sda")

    assert delta == DiskDelta("sda", 0.0, 2, 8 * 4096, 1, 4096)


def test_disk_never_baselined_signals_no_previous_data(sources, clock) -> None:
    sampler = _sampler(sources, clock)
    sampler.baseline()
    sources.block_stat.set("sdz", reads=7)

    with pytest.raises(Unavailable, match="no previous data for sdz"):
        sampler.get_disk_stats("sdz")

    # the first reading was kept, so the next call has something to diff
    sources.block_stat.set("sdz", reads=9)
    assert sampler.get_disk_stats("sdz").reads == 2


def test_vanished_disk_keeps_stored_baseline(sources, clock) -> None:
    sources.sector_sizes.sizes["sda"] = 512
    sources.block_stat.set("sda", reads=100)
    sampler = _sampler(sources, clock)
    sampler.baseline()
    stored = sampler.store.peek(Domain.DISK, "sda")

    del sources.block_stat.counters["sda"]
    with pytest.raises(Unavailable, match="no data for sda"):
        sampler.get_disk_stats("sda")
    assert sampler.store.peek(Domain.DISK, "sda") is stored

    sources.block_stat.set("sda", reads=120)
    assert sampler.get_disk_stats("sda").reads == 20


def test_unresolved_sector_size_still_reports_counts(sources, clock) -> None:
    sources.block_stat.set("sdb", reads=5, read_sectors=10, writes=5, write_sectors=10)
    sampler = _sampler(sources, clock)
    sampler.baseline()
    with pytest.raises(Unavailable):
        sampler.get_disk_stats("sdb")

    sources.block_stat.set("sdb", reads=8, read_sectors=20, writes=6, write_sectors=12)
    delta = sampler.get_disk_stats("sdb")

    assert delta.reads == 3
    assert delta.writes == 1
    assert delta.bytes_read is None
    assert delta.bytes_written is None


def test_net_inclusion_policy(sources, clock) -> None:
    net = sources.net_devices
    net.set("eth0", 1000, 1000)  # up, idle
    net.set("eth1", 500, 500)    # down, idle
    net.set("eth2", 700, 700)    # down, active
    sources.net_up.up = {"eth0"}
    sampler = _sampler(sources, clock)
    sampler.baseline()

    clock.now = 5.0
    net.set("eth2", 900, 700)
    net.set("eth3", 10, 10)      # new, down
    net.set("eth4", 20, 30)      # new, up
    sources.net_up.up = {"eth0", "eth4"}

    stats = {s.device: s for s in sampler.get_net_stats()}

    assert set(stats) == {"eth0", "eth2", "eth4"}
    assert stats["eth0"] == NetDelta("eth0", 5.0, 0, 0)
    assert stats["eth2"] == NetDelta("eth2", 5.0, 200, 0)
    assert stats["eth4"] == RawNetReading("eth4", 5.0, True, 20, 30)


def test_net_diffs_against_previous_sample_not_baseline(sources, clock) -> None:
    sources.net_devices.set("eth0", 100, 0)
    sources.net_up.up = {"eth0"}
    sampler = _sampler(sources, clock)
    sampler.baseline()

    sources.net_devices.set("eth0", 150, 0)
    sampler.get_net_stats()
    sources.net_devices.set("eth0", 175, 0)

    (delta,) = sampler.get_net_stats()
    assert delta.bytes_received == 25


def test_net_read_failure_is_unavailable(sources, clock) -> None:
    sampler = _sampler(sources, clock)
    sampler.baseline()
    sources.net_devices.fail = True

    with pytest.raises(Unavailable):
        sampler.get_net_stats()


def test_net_baseline_failure_is_not_fatal(sources, clock) -> None:
    sources.net_devices.fail = True
    sources.net_devices.set("eth0", 100, 0)
    sources.net_up.up = {"eth0"}
    sampler = _sampler(sources, clock)
    sampler.baseline()

    sources.net_devices.fail = False
    assert sampler.get_net_stats() == [RawNetReading("eth0", 0.0, True, 100, 0)]


def test_rebaseline_resets_reference_point(sources, clock) -> None:
    sources.sector_sizes.sizes["sda"] = 512
    sources.block_stat.set("sda", reads=100)
    sources.net_devices.set("eth0", 100, 0)
    sources.net_up.up = {"eth0"}
    sampler = _sampler(sources, clock)
    sampler.baseline()

    sources.block_stat.set("sda", reads=300)
    sources.net_devices.set("eth0", 400, 0)
    sampler.baseline()

    sources.block_stat.set("sda", reads=310)
    sources.net_devices.set("eth0", 410, 0)

    assert sampler.get_disk_stats("sda").reads == 10
    assert sampler.get_net_stats()[0].bytes_received == 10


def test_cpu_count_failure_is_deferred(sources, clock) -> None:
    sources.cpu_listing.count = Outcome.failed("No CPUs found")
    sources.block_stat.set("sda", reads=1)
    sources.sector_sizes.sizes["sda"] = 512
    sampler = _sampler(sources, clock)

    sampler.baseline()

    assert sampler.is_baselined
    assert sampler.policy.bits == 32
    for _ in range(2):
        with pytest.raises(Unavailable, match="No CPUs found"):
            sampler.get_number_of_cpus()
    # other domains were still baselined
    sources.block_stat.set("sda", reads=2)
    assert sampler.get_disk_stats("sda").reads == 1

    sources.cpu_listing.count = Outcome.ok(2)
    sampler.baseline()
    assert sampler.get_number_of_cpus() == 2


def test_failed_baseline_reason_is_carried(sources, clock) -> None:
    def broken(*devices):
        raise Unavailable("lsblk exploded")

    sources.sector_sizes.read = broken
    sampler = _sampler(sources, clock)

    with pytest.raises(Unavailable):
        sampler.baseline()
    with pytest.raises(NotBaselined, match="lsblk exploded"):
        sampler.get_net_stats()


def test_sample_cpu_diffs_consecutive_samples(sources, clock) -> None:
    sampler = _sampler(sources, clock)
    sampler.baseline()

    with pytest.raises(Unavailable, match="no previous data for cpu"):
        sampler.sample_cpu()

    sources.uptime.times = CpuTimes(uptime=160.0, idle=500.0)
    assert sampler.sample_cpu() == CpuDelta(uptime=60.0, idle=150.0)


def test_uptime_failure_after_baseline_state_transition(sources, clock) -> None:
    sources.uptime.times = None
    sampler = _sampler(sources, clock)

    with pytest.raises(Unavailable, match="Uptime not found"):
        sampler.baseline()
    assert sampler.is_baselined


def test_sample_dispatches_by_domain(sources, clock) -> None:
    sources.block_stat.set("sda", reads=1)
    sources.sector_sizes.sizes["sda"] = 512
    sources.net_devices.set("eth0", 1, 1)
    sources.net_up.up = {"eth0"}
    sampler = _sampler(sources, clock)
    sampler.baseline()
    sources.block_stat.set("sda", reads=4)

    assert sampler.sample(Domain.DISK, "sda").reads == 3
    assert [s.device for s in sampler.sample(Domain.NET)] == ["eth0"]
    with pytest.raises(Unavailable):
        sampler.sample(Domain.CPU)
    with pytest.raises(ValueError):
        sampler.sample(Domain.DISK)


def test_missing_agent_ids_are_unavailable(sources, clock) -> None:
    sources.agent_ids.ids = []
    sampler = _sampler(sources, clock)
    sampler.baseline()

    with pytest.raises(Unavailable, match="no agent ids found"):
        sampler.get_agent_ids()


def test_baseline_survives_undecodable_lsblk_output(tmp_path) -> None:
    lsblk = tmp_path / "bin" / "lsblk"
    lsblk.parent.mkdir(parents=True)
    lsblk.write_text("#!/bin/sh\nprintf 'NAME LOG-SEC\\nsd\\377 512\\nsda 512\\n'\n", encoding="utf-8")
    lsblk.chmod(0o755)
    stat = tmp_path / "sys" / "class" / "block" / "sda" / "stat"
    stat.parent.mkdir(parents=True)
    stat.write_text("100 0 800 0 50 0 400 0 0 0 0\n", encoding="utf-8")
    uptime = tmp_path / "proc" / "uptime"
    uptime.parent.mkdir(parents=True)
    uptime.write_text("500.0 1500.0\n", encoding="utf-8")
    sampler = Sampler(root=str(tmp_path))

    assert sampler.baseline() == CpuTimes(uptime=500.0, idle=1500.0)
    assert sampler.is_baselined
    assert sampler.store.peek(Domain.DISK, "sda").sector_size == 512
