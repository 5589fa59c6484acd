from __future__ import annotations
import logging
import re
from typing import List

from core.errors import Unavailable
from core.readings import Filesystem
from core.util import run_command, under_root

# Only local ext filesystems are reported.
FS_TYPE = re.compile(r"^ext[234]$")

logger = logging.getLogger(__name__)

class Df:
    """
    Mounted ext2/3/4 filesystems via `df --block-size=1 -T`.

    Output columns: Filesystem, Type, 1B-blocks, Used, Available, Use%,
    Mounted on.
    """

    def __init__(self, root: str = "/") -> None:
        self.executable = under_root(root, "bin", "df")

    def read(self) -> List[Filesystem]:
        """
        Raises:
            Unavailable: df cannot be run or prints nothing
        """
        try:
            text = run_command([self.executable, "--block-size=1", "-T"])
        except OSError as e:
            raise Unavailable(str(e)) from e
        if not text.strip():
            raise Unavailable(f"{self.executable}: no output")
        return parse_df(text)

def parse_df(text: str) -> List[Filesystem]:
    """
    Parse df output, skipping rows that fail validation.

    Returns:
        Filesystems in listing order
    """
    out: List[Filesystem] = []
    for line in text.splitlines()[1:]:
        cols = line.split()
        if len(cols) != 7 or not FS_TYPE.match(cols[1]):
            continue
        try:
            out.append(Filesystem.from_row(cols[0], cols[6], cols[2], cols[4]))
        except ValueError as e:
            logger.debug("Skipping malformed df row", extra={"reason": str(e)})
    return out
