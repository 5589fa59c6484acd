from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from collectors.agent_ids import AgentIds
from collectors.df import Df
from collectors.lsblk import Lsblk
from collectors.lscpu import Lscpu
from collectors.proc_meminfo import MemInfo
from collectors.proc_net_dev import NetDev
from collectors.proc_net_route import NetRoute
from collectors.proc_uptime import Uptime
from collectors.sys_block import SysBlockStat

@dataclass
class Sources:
    """
    One instance of every data source the sampler reads from.

    Fields are typed loosely so tests can substitute stubs with the same
    read() methods.
    """

    meminfo: Any
    uptime: Any
    filesystems: Any
    net_devices: Any
    net_up: Any
    sector_sizes: Any
    block_stat: Any
    cpu_listing: Any
    agent_ids: Any

    @classmethod
    def for_root(cls, root: str = "/") -> "Sources":
        return cls(
            meminfo=MemInfo(root),
            uptime=Uptime(root),
            filesystems=Df(root),
            net_devices=NetDev(root),
            net_up=NetRoute(root),
            sector_sizes=Lsblk(root),
            block_stat=SysBlockStat(root),
            cpu_listing=Lscpu(root),
            agent_ids=AgentIds(root),
        )
