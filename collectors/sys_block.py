from __future__ import annotations

from core.errors import Unavailable
from core.readings import DiskCounters
from core.util import under_root

SOURCE_STAT = ("sys", "class", "block", "{dev}", "stat")

class SysBlockStat:
    """
    Collector for cumulative I/O counters from /sys/class/block/<dev>/stat.

    Fields used (1-based): 1 reads completed, 3 sectors read,
    5 writes completed, 7 sectors written.
    """

    def __init__(self, root: str = "/") -> None:
        self.root = root

    def path(self, device: str) -> str:
        return under_root(self.root, *(p.format(dev=device) for p in SOURCE_STAT))

    def read(self, device: str) -> DiskCounters:
        """
        Args:
            device: Block device name without /dev/ (e.g. 'sda')

        Raises:
            Unavailable: The stat file is missing, empty or malformed
        """
        path = self.path(device)
        try:
            with open(path, "r", encoding="utf-8") as f:
                cols = f.readline().split()
        except OSError as e:
            raise Unavailable(f"{path}: {e.strerror}") from e
        if not cols:
            raise Unavailable(f"{path}: is empty")
        try:
            return DiskCounters(
                reads=int(cols[0]),
                read_sectors=int(cols[2]),
                writes=int(cols[4]),
                write_sectors=int(cols[6]),
            )
        except (IndexError, ValueError) as e:
            raise Unavailable(f"{path}: malformed") from e
