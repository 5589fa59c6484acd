from __future__ import annotations
import os, time, socket, pathlib, subprocess
from typing import Dict, Optional, Sequence

from core.readings import DEV_PREFIX

def now_ts() -> float:
    """
    Get current Unix timestamp.
    
    Returns:
        Current time as float seconds since epoch
    """
    return time.time()

def hostname() -> str:
    """
    Get system hostname.
    
    Returns:
        Current system hostname as string
    """
    return socket.gethostname()

def ensure_parent(path: str | os.PathLike) -> None:
    """
    Create parent directories for a file path, if they don't exist.
    
    Args:
        path: File path whose parent directories should be created
    """
    pathlib.Path(path).parent.mkdir(parents=True, exist_ok=True)

def under_root(root: str, *parts: str) -> str:
    """
    Join a system path below an alternate filesystem root.

    Args:
        root: Root directory ("/" on a live host)
        parts: Path components, e.g. ("proc", "meminfo")
    """
    return os.path.join(root, *parts)

def strip_dev_prefix(device: str) -> str:
    """Turn '/dev/sda' into 'sda'; plain names pass through."""
    if device.startswith(DEV_PREFIX):
        return device[len(DEV_PREFIX):]
    return device

def run_command(args: Sequence[str], env: Optional[Dict[str, str]] = None) -> str:
    """
    Run an external utility and return its stdout.

    The exit status is ignored: tools like df exit non-zero when one mount
    is unreadable but still print every other row. Undecodable bytes are
    replaced.

    Raises:
        OSError: The executable is missing or cannot be started
    """
    completed = subprocess.run(
        list(args),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        env=env,
        text=True,
        errors="replace",
        check=False,
    )
    return completed.stdout
