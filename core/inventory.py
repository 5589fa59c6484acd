from __future__ import annotations
import logging
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class SectorSizeSource(Protocol):
    def read(self, *devices: str) -> Dict[str, int]: ...


class DeviceInventory:
    """
    Cache of disk sector sizes.

    Sector size is treated as immutable hardware metadata: once a device has
    a size it is never queried again, across baseline() calls too. Misses are
    not cached, so a device without a known size is asked about again on the
    next resolve().
    """

    def __init__(self, source: SectorSizeSource) -> None:
        self._source = source
        self._sector_sizes: Dict[str, int] = {}

    def resolve(self, device: str) -> Optional[int]:
        """
        Sector size of a device in bytes.

        On a miss the source is queried and every size it returns is cached,
        not only the requested one.

        Returns:
            Sector size, or None if the device could not be resolved
        """
        if device is None:
            raise ValueError("device is None")
        if device not in self._sector_sizes:
            self._sector_sizes.update(self._source.read(device))
        size = self._sector_sizes.get(device)
        if size is None:
            logger.debug("Sector size unresolved", extra={"device": device})
        return size

    def resolve_all(self) -> Dict[str, int]:
        """
        Pre-warm the cache with every currently visible device.

        Returns:
            Mapping of device to sector size for the devices the source listed
            this time (empty when the listing utility is absent)
        """
        found = self._source.read()
        for device, size in found.items():
            self._sector_sizes.setdefault(device, size)
        return {device: self._sector_sizes[device] for device in found}
