from __future__ import annotations
import glob
import os
from typing import List

from core.util import under_root

BASE_DIR = ("etc", "opt", "microsoft", "omsagent")
CONF_NAME = os.path.join("conf", "omsadmin.conf")
WORKSPACE_GLOB = "????????-????-????-????-????????????"
GUID_KEY = "AGENT_GUID="

class AgentIds:
    """
    Identifiers of the monitoring agents installed on the host.

    Multi-homed agents keep one omsadmin.conf per workspace directory; older
    single-homed agents keep one directly under conf/.
    """

    def __init__(self, root: str = "/") -> None:
        self.base_dir = under_root(root, *BASE_DIR)

    def read(self) -> List[str]:
        paths = sorted(glob.glob(os.path.join(self.base_dir, WORKSPACE_GLOB, CONF_NAME)))
        if not paths:
            paths = glob.glob(os.path.join(self.base_dir, CONF_NAME))
        ids: List[str] = []
        for path in paths:
            guid = _read_guid(path)
            if guid:
                ids.append(guid)
        return ids

def _read_guid(path: str) -> str | None:
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            if line.startswith(GUID_KEY):
                return line.rstrip("\n").split("=", 1)[1]
    return None
