from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Domain(str, Enum):
    DISK = "disk"
    NET = "net"
    CPU = "cpu"


# Key used for domains with a single reading per host.
SINGLETON = ""


class BaselineStore:
    """
    Last-seen raw reading per (domain, device).

    Entries are created on the first successful read and replaced on every
    later one. Entries for vanished devices are never deleted; they are only
    consulted again if the same device reappears. Not thread-safe.
    """

    def __init__(self) -> None:
        self._entries: Dict[Tuple[Domain, str], Any] = {}

    def reset(self, domain: Domain) -> None:
        """Drop every entry for a domain."""
        for key in [k for k in self._entries if k[0] == domain]:
            del self._entries[key]

    def set(self, domain: Domain, device: Optional[str], reading: Any) -> None:
        self._entries[(domain, device or SINGLETON)] = reading

    def get_and_replace(self, domain: Domain, device: Optional[str], reading: Any) -> Optional[Any]:
        """
        Store a new reading and hand back the one it replaces.

        Returns:
            The previous reading, or None if the key had never been seen
        """
        key = (domain, device or SINGLETON)
        previous = self._entries.get(key)
        self._entries[key] = reading
        return previous

    def peek(self, domain: Domain, device: Optional[str] = None) -> Optional[Any]:
        return self._entries.get((domain, device or SINGLETON))
