from __future__ import annotations
import logging
import os
from typing import Tuple

from core.outcome import Outcome
from core.util import run_command, under_root

OP_MODE_LABEL = "CPU op-mode(s):"

logger = logging.getLogger(__name__)

class Lscpu:
    """
    CPU count and 64-bit capability via lscpu.

    The count comes from `lscpu -p` (one line per CPU, comments start with
    '#'); the width from the "CPU op-mode(s)" line of plain `lscpu` run
    under the C locale.
    """

    def __init__(self, root: str = "/") -> None:
        self.executable = under_root(root, "usr", "bin", "lscpu")

    def read(self) -> Tuple[Outcome[int], bool]:
        """
        Returns:
            (CPU count or the reason it is unknown, whether the CPU is 64-bit).
            The 64-bit flag is False whenever it cannot be determined.
        """
        try:
            count = count_cpus(run_command([self.executable, "-p"]))
            env = dict(os.environ, LC_ALL="C")
            is_64_bit = parse_is_64_bit(run_command([self.executable], env=env))
        except OSError as e:
            logger.warning("lscpu failed", extra={"reason": str(e)})
            return Outcome.failed(str(e)), False

        if count == 0:
            return Outcome.failed("No CPUs found"), is_64_bit
        return Outcome.ok(count), is_64_bit

def count_cpus(text: str) -> int:
    return sum(1 for line in text.splitlines() if line[:1].isdigit())

def parse_is_64_bit(text: str) -> bool:
    for line in text.splitlines():
        if line.startswith(OP_MODE_LABEL):
            return "64-bit" in line
    return False
