"""
report_ndjson.py
Reads NDJSON logs from the agent (record_type=="sample") and prints per-device
totals over the whole log: network bytes per interface and disk operations
and bytes per device, each with its share of the domain total.

Usage:
    python3 report_ndjson.py /path/to/events.ndjson
"""

import sys
import json
from collections import defaultdict
from typing import Any, Dict, Iterator

# ---------------------- Loading ----------------------

def iter_samples(path: str) -> Iterator[Dict[str, Any]]:
    """
    Yields the payload of every sample record, skipping lines that are not
    valid JSON.
    """
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                rec = json.loads(line)
            except json.JSONDecodeError:
                continue
            if rec.get("record_type") != "sample":
                continue
            payload = rec.get("payload", {})
            if isinstance(payload, dict):
                yield payload

# ---------------------- Analysis ----------------------

def summarize(path: str) -> Dict[str, Any]:
    """
    Sums deltas per device.

    Raw first-seen interface readings (no delta_time) are cumulative counters,
    not deltas, and are left out of the totals.
    """
    net: Dict[str, Dict[str, int]] = defaultdict(lambda: {"bytes_received": 0, "bytes_sent": 0})
    disks: Dict[str, Dict[str, int]] = defaultdict(
        lambda: {"reads": 0, "writes": 0, "bytes_read": 0, "bytes_written": 0}
    )
    samples = 0
    unavailable: Dict[str, int] = defaultdict(int)

    for payload in iter_samples(path):
        samples += 1
        for item in payload.get("net") or []:
            if not isinstance(item, dict) or "delta_time" not in item:
                continue
            totals = net[item["device"]]
            totals["bytes_received"] += int(item.get("bytes_received") or 0)
            totals["bytes_sent"] += int(item.get("bytes_sent") or 0)
        for dev, delta in (payload.get("disks") or {}).items():
            if not isinstance(delta, dict):
                continue
            totals = disks[dev]
            for key in totals:
                # bytes are null when the sector size is unknown
                totals[key] += int(delta.get(key) or 0)
        for metric in payload.get("unavailable") or {}:
            unavailable[metric] += 1

    return {"samples": samples, "net": dict(net), "disks": dict(disks), "unavailable": dict(unavailable)}

def fmt_pct(n: float) -> str:
    return f"{n:5.1f}%"

def _share(part: int, whole: int) -> str:
    return fmt_pct(part / whole * 100 if whole else 0.0)

def main(path: str) -> None:
    summary = summarize(path)
    if summary["samples"] == 0:
        print("No sample records found.")
        return

    print(f"Samples: {summary['samples']}\n")

    net = summary["net"]
    net_total = sum(t["bytes_received"] + t["bytes_sent"] for t in net.values())
    print("=== Network bytes by interface ===")
    for dev, t in sorted(net.items(), key=lambda kv: -(kv[1]["bytes_received"] + kv[1]["bytes_sent"])):
        both = t["bytes_received"] + t["bytes_sent"]
        print(f"{dev:12s} rx {t['bytes_received']:14d}  tx {t['bytes_sent']:14d}  ({_share(both, net_total)})")
    print()

    disks = summary["disks"]
    disk_total = sum(t["bytes_read"] + t["bytes_written"] for t in disks.values())
    print("=== Disk I/O by device ===")
    for dev, t in sorted(disks.items()):
        moved = t["bytes_read"] + t["bytes_written"]
        print(f"{dev:12s} reads {t['reads']:10d}  writes {t['writes']:10d}  "
              f"read {t['bytes_read']:14d}B  written {t['bytes_written']:14d}B  ({_share(moved, disk_total)})")
    print()

    if summary["unavailable"]:
        print("=== Unavailable metrics (samples affected) ===")
        for metric, count in sorted(summary["unavailable"].items()):
            print(f"{metric:26s} {count:6d}")

if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python3 report_ndjson.py /path/to/events.ndjson")
        sys.exit(1)
    main(sys.argv[1])
