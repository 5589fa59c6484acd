from __future__ import annotations

from core.errors import Unavailable
from core.readings import CpuTimes
from core.util import under_root

SOURCE = ("proc", "uptime")

class Uptime:
    """
    Collector for cumulative uptime and idle seconds from /proc/uptime.
    """

    def __init__(self, root: str = "/") -> None:
        self.path = under_root(root, *SOURCE)

    def read(self) -> CpuTimes:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                cols = f.readline().split()
        except OSError as e:
            raise Unavailable(f"{self.path}: {e.strerror}") from e

        uptime = _to_float(cols, 0)
        if uptime is None:
            raise Unavailable("Uptime not found")
        idle = _to_float(cols, 1)
        if idle is None:
            raise Unavailable("Idle time not found")
        return CpuTimes(uptime=uptime, idle=idle)

def _to_float(cols: list, index: int) -> float | None:
    if len(cols) <= index:
        return None
    try:
        return float(cols[index])
    except ValueError:
        return None
