from __future__ import annotations
from typing import Optional

from core.readings import NetDelta, RawNetReading


def include_net(current: RawNetReading, delta: Optional[NetDelta]) -> bool:
    """
    Whether an interface is worth reporting.

    An interface is reported when it is administratively up, or when it had a
    previous reading and moved traffic since. A newly seen interface that is
    down is dropped.

    Args:
        current: Latest raw reading of the interface
        delta: Delta against the previous reading, None if there was none
    """
    if current.up:
        return True
    return delta is not None and delta.is_active()

