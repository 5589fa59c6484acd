from __future__ import annotations
import logging
import time
from typing import Any, Dict, List, Optional, Tuple

from core.config import AgentConfig, load_config
from core.diff import diff_cpu
from core.errors import Unavailable
from core.logging_config import configure_logging
from core.readings import CpuTimes
from core.sampler import Sampler
from core.util import hostname, now_ts, strip_dev_prefix
from output.json_sink import JsonSink

SCHEMA_VERSION = "1.0"

logger = logging.getLogger("agent")

def _disks_to_sample(cfg: AgentConfig, filesystems: List[Any]) -> List[str]:
    """
    Configured disks, or else every device backing a listed filesystem.
    """
    if cfg.disks:
        return list(cfg.disks)
    seen: List[str] = []
    for fs in filesystems:
        dev = strip_dev_prefix(fs.device_name)
        if dev not in seen:
            seen.append(dev)
    return seen

def build_sample_payload(
    sampler: Sampler, cfg: AgentConfig, prev_cpu: Optional[CpuTimes]
) -> Tuple[Dict[str, Any], Optional[CpuTimes]]:
    """
    Collect one interval's worth of deltas.

    Every metric is collected independently: an Unavailable metric is
    recorded under "unavailable" with its reason and the rest still run.

    Args:
        sampler: Baselined sampler
        cfg: Agent configuration
        prev_cpu: Uptime/idle from the previous interval, None if unknown

    Returns:
        (payload with cpu, memory, net, disks, filesystems and unavailable
        keys; raw uptime/idle to pass as prev_cpu next time)
    """
    unavailable: Dict[str, str] = {}
    payload: Dict[str, Any] = {"cpu": None, "memory": None, "net": [], "disks": {}, "filesystems": []}

    cpu_now = prev_cpu
    try:
        cpu_now = sampler.get_cpu_idle()
        if prev_cpu is not None:
            payload["cpu"] = diff_cpu(cpu_now, prev_cpu)
    except Unavailable as e:
        unavailable["cpu"] = e.reason

    try:
        payload["memory"] = sampler.get_available_memory_kb()
    except Unavailable as e:
        unavailable["memory"] = e.reason

    try:
        payload["net"] = sampler.get_net_stats()
    except Unavailable as e:
        unavailable["net"] = e.reason

    try:
        payload["filesystems"] = sampler.get_filesystems()
    except Unavailable as e:
        unavailable["filesystems"] = e.reason

    for dev in _disks_to_sample(cfg, payload["filesystems"]):
        try:
            payload["disks"][dev] = sampler.get_disk_stats(dev)
        except Unavailable as e:
            unavailable[f"disk.{dev}"] = e.reason

    payload["unavailable"] = unavailable
    return payload, cpu_now

def main() -> None:
    """
    Main application loop for the host telemetry agent.

    This function:
    1. Loads configuration from YAML and environment variables
    2. Baselines the sampler and writes a baseline record
    3. Every interval, writes a sample record of per-interval deltas

    The loop runs indefinitely until interrupted.
    """

    # load config and initialize objects
    cfg = load_config()
    configure_logging(cfg.log_level)
    sink = JsonSink(cfg.output_path)
    sampler = Sampler(root=cfg.root)

    host = hostname()
    seq = 1
    prev_cpu: Optional[CpuTimes] = None
    baseline_payload: Dict[str, Any] = {"unavailable": {}}
    try:
        prev_cpu = sampler.baseline()
        baseline_payload["cpu"] = prev_cpu
    except Unavailable as e:
        baseline_payload["unavailable"]["cpu"] = e.reason
    try:
        baseline_payload["cpu_count"] = sampler.get_number_of_cpus()
    except Unavailable as e:
        baseline_payload["unavailable"]["cpu_count"] = e.reason

    # BASELINE record
    sink.write({
        "schema_version": SCHEMA_VERSION,
        "record_type": "baseline",
        "host": host,
        "ts_unix": now_ts(),
        "seq": seq,
        "payload": baseline_payload,
        "meta": {
            "interval_sec": cfg.poll_interval_sec,
            "counter_bits": sampler.policy.bits if sampler.policy.is_determined else None,
        },
    })

    while True:
        time.sleep(cfg.poll_interval_sec)
        ts = now_ts()
        payload, prev_cpu = build_sample_payload(sampler, cfg, prev_cpu)

        for metric, reason in payload["unavailable"].items():
            logger.debug("Metric unavailable", extra={"domain": metric, "reason": reason, "seq": seq + 1})

        # SAMPLE record
        seq += 1
        sink.write({
            "schema_version": SCHEMA_VERSION,
            "record_type": "sample",
            "host": host,
            "ts_unix": ts,
            "seq": seq,
            "payload": payload,
            "meta": {"interval_sec": cfg.poll_interval_sec},
        })

if __name__ == "__main__":
    main()
