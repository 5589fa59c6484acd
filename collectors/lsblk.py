from __future__ import annotations
import logging
from typing import Dict

from core.util import run_command, under_root

logger = logging.getLogger(__name__)

class Lsblk:
    """
    Logical sector sizes of block devices, via `lsblk -sd -oNAME,LOG-SEC`.

    Hosts without lsblk are tolerated: every read returns an empty mapping.
    """

    def __init__(self, root: str = "/") -> None:
        self.executable = under_root(root, "bin", "lsblk")

    def read(self, *devices: str) -> Dict[str, int]:
        """
        List sector sizes.

        Args:
            devices: Restrict the result to these names; all devices if empty

        Returns:
            Mapping of device name to sector size in bytes
        """
        try:
            text = run_command([self.executable, "-sd", "-oNAME,LOG-SEC"])
        except FileNotFoundError:
            logger.debug("lsblk not installed", extra={"reason": self.executable})
            return {}
        except OSError as e:
            logger.warning("lsblk failed", extra={"reason": str(e)})
            return {}
        return parse_lsblk(text, devices)

def parse_lsblk(text: str, devices: tuple = ()) -> Dict[str, int]:
    out: Dict[str, int] = {}
    for line in text.splitlines()[1:]:
        cols = line.split()
        if len(cols) < 2:
            continue
        if devices and cols[0] not in devices:
            continue
        try:
            out[cols[0]] = int(cols[1])
        except ValueError:
            continue
    return out
