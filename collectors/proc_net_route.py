from __future__ import annotations
import logging
from typing import Set

from core.util import under_root

SOURCE = ("proc", "net", "route")

logger = logging.getLogger(__name__)

class NetRoute:
    """
    Best-effort list of interfaces that are up, taken as those owning a route
    in /proc/net/route.
    """

    def __init__(self, root: str = "/") -> None:
        self.path = under_root(root, *SOURCE)

    def read(self) -> Set[str]:
        """
        Returns:
            Set of interface names; empty if the routing table is unreadable
        """
        out: Set[str] = set()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                f.readline()  # header
                for line in f:
                    cols = line.split()
                    if cols:
                        out.add(cols[0])
        except OSError as e:
            logger.warning("Routing table unreadable, treating all interfaces as down", extra={"reason": e.strerror})
            return set()
        return out
