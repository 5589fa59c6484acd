from __future__ import annotations
from typing import Optional

from core.errors import Unavailable
from core.readings import MemoryInfo
from core.util import under_root

SOURCE = ("proc", "meminfo")

class MemInfo:
    """
    Collector for total and available memory from /proc/meminfo.
    """

    def __init__(self, root: str = "/") -> None:
        self.path = under_root(root, *SOURCE)

    def read(self) -> MemoryInfo:
        """
        Read MemTotal and MemAvailable.

        Returns:
            MemoryInfo with both values in kB

        Raises:
            Unavailable: The file cannot be read or either field is missing
        """
        total: Optional[int] = None
        available: Optional[int] = None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                for line in f:
                    cols = line.split()
                    if len(cols) != 3 or cols[2] != "kB":
                        continue
                    try:
                        value = int(cols[1])
                    except ValueError:
                        continue
                    if value < 0:
                        continue
                    if cols[0] == "MemTotal:":
                        total = value
                    elif cols[0] == "MemAvailable:":
                        available = value
        except OSError as e:
            raise Unavailable(f"{self.path}: {e.strerror}") from e

        if available is None:
            raise Unavailable("Available memory not found")
        if total is None:
            raise Unavailable("Total memory not found")
        return MemoryInfo(available_kb=available, total_kb=total)
