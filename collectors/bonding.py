from __future__ import annotations
import os
from typing import Dict, NamedTuple

from prometheus_client import CollectorRegistry, Gauge

from core.util import read_fields, read_sysfs

NAME = "bonding"
SYSFS_NET = "/sys/class/net"

class BondingStatus(NamedTuple):
    """Slave counts of one bonding master."""
    slaves: int
    active: int

def _read_operstate(root: str, master: str, slave: str) -> str:
    # lower_<slave> on current kernels, slave_<slave> on older ones
    try:
        return read_sysfs(os.path.join(root, master, f"lower_{slave}", "operstate"))
    except FileNotFoundError:
        return read_sysfs(os.path.join(root, master, f"slave_{slave}", "operstate"))

def read_bonding_stats(root: str = SYSFS_NET) -> Dict[str, BondingStatus]:
    """
    Count configured and active slaves of every bonding master below root.
    
    Layout read:
    - <root>/bonding_masters
    - <root>/<master>/bonding/slaves
    - <root>/<master>/lower_<slave>/operstate (or slave_<slave>/operstate)
    
    Args:
        root: Network class directory, normally /sys/class/net
        
    Returns:
        Dictionary mapping master name to its BondingStatus.
        
    Raises:
        OSError: any pseudo-file could not be read. Nothing is returned
        for masters parsed before the failure.
    """
    status: Dict[str, BondingStatus] = {}
    for master in read_fields(os.path.join(root, "bonding_masters")):
        slaves = 0
        active = 0
        for slave in read_fields(os.path.join(root, master, "bonding", "slaves")):
            state = _read_operstate(root, master, slave)
            slaves += 1
            if state == "up":
                active += 1
        status[master] = BondingStatus(slaves, active)
    return status

class BondingReader:
    """
    Reader for linux bonding interfaces exposed under /sys/class/net.
    
    Every call to read() walks the tree from scratch; nothing is cached.
    """

    def __init__(self, root: str = SYSFS_NET) -> None:
        """
        Args:
            root: Network class directory (override for tests or a mounted host sysfs)
        """
        self.root = root

    def read(self) -> Dict[str, BondingStatus]:
        return read_bonding_stats(self.root)

class BondingCollector:
    """
    Exposes the number of configured and active slaves of linux bonding interfaces.
    
    Metrics (label "master"):
    - net_bonding_slaves: configured slaves per bonding interface
    - net_bonding_slaves_active: active slaves per bonding interface
    
    Labels of masters that disappear keep their last value in the registry.
    """

    def __init__(self,
                 registry: CollectorRegistry | None = None,
                 root: str = SYSFS_NET,
                 namespace: str = "") -> None:
        """
        Initialize the collector and register its gauges.
        
        Args:
            registry: Registry the gauges are published to (unregistered if None)
            root: Network class directory to read from
            namespace: Optional metric name prefix (e.g. "node")
        """
        self.reader = BondingReader(root)
        self.slaves = Gauge("net_bonding_slaves",
                            "Number of configured slaves per bonding interface.",
                            labelnames=["master"], namespace=namespace, registry=registry)
        self.slaves_active = Gauge("net_bonding_slaves_active",
                                   "Number of active slaves per bonding interface.",
                                   labelnames=["master"], namespace=namespace, registry=registry)

    def update(self) -> Dict[str, BondingStatus]:
        """
        Read bonding state once and publish it.
        
        Returns:
            The status mapping that was published
            
        Raises:
            OSError: the read failed; no gauge is touched in that case
        """
        stats = self.reader.read()
        for master, st in stats.items():
            self.slaves.labels(master).set(st.slaves)
            self.slaves_active.labels(master).set(st.active)
        return stats
