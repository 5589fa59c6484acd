from __future__ import annotations
import os
from typing import Dict

from core.errors import Unavailable
from core.readings import NetCounters
from core.util import under_root

SOURCE = ("proc", "net", "dev")
VIRTUAL_NET = ("sys", "devices", "virtual", "net")

# Longest accepted interface token, trailing colon included.
MAX_TOKEN_LEN = 9

class NetDev:
    """
    Collector for per-interface byte counters from /proc/net/dev.

    Virtual interfaces (those listed under /sys/devices/virtual/net, e.g. lo,
    bridges, veths) are skipped.
    """

    def __init__(self, root: str = "/") -> None:
        self.path = under_root(root, *SOURCE)
        self.virtual_dir = under_root(root, *VIRTUAL_NET)

    def read(self) -> Dict[str, NetCounters]:
        """
        Read receive and transmit byte counters.

        Returns:
            Mapping of interface name to its cumulative counters

        Raises:
            Unavailable: /proc/net/dev cannot be read
        """
        out: Dict[str, NetCounters] = {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                for line in f:
                    cols = line.split()
                    if not cols:
                        continue
                    token = cols[0]
                    # header lines have no trailing colon on the first token
                    if not token.endswith(":") or len(token) > MAX_TOKEN_LEN:
                        continue
                    dev = token[:-1]
                    if os.path.isdir(os.path.join(self.virtual_dir, dev)):
                        continue
                    try:
                        out[dev] = NetCounters(bytes_received=int(cols[1]), bytes_sent=int(cols[9]))
                    except (IndexError, ValueError):
                        continue
        except OSError as e:
            raise Unavailable(f"{self.path}: {e.strerror}") from e
        return out
