from __future__ import annotations
import time
import os
import logging
from typing import Dict, Any
import yaml  # from pyyaml
from prometheus_client import CollectorRegistry, start_http_server

from core.scheduler import Scheduler

# Collectors
from collectors import bonding

log = logging.getLogger("bondstat")

# Collectors available to the agent, by name
FACTORIES = {
    bonding.NAME: bonding.BondingCollector,
}

DEFAULTS: Dict[str, Any] = {
    "sysfs_root": bonding.SYSFS_NET,
    "poll_interval_sec": 15.0,
    "listen_port": 9417,
    "namespace": "",
    "collectors": [bonding.NAME],
    "log_level": "INFO",
}

def load_config(path: str = "config.yml") -> Dict[str, Any]:
    """
    Load configuration from YAML file and override with environment variables.
    
    Environment variables override YAML values:
    - BONDSTAT_SYSFS_ROOT: Network class directory (e.g., /host/sys/class/net)
    - BONDSTAT_POLL_INTERVAL: Polling interval in seconds (e.g., 15)
    - BONDSTAT_LISTEN_PORT: Port of the metrics endpoint (e.g., 9417)
    - BONDSTAT_LOG_LEVEL: Logging level name (e.g., DEBUG)
    
    Args:
        path: Path to the YAML configuration file
        
    Returns:
        Dictionary containing defaults merged with file and environment values
    """
    config = dict(DEFAULTS)

    # load configuration from yaml
    try:
        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if isinstance(loaded, dict):
            config.update(loaded)
        else:
            log.warning("Config file %s is not a mapping, using defaults", path)
    except FileNotFoundError:
        log.warning("Config file %s not found, using defaults", path)

    # check for environment variables
    if "BONDSTAT_SYSFS_ROOT" in os.environ:
        config["sysfs_root"] = os.environ["BONDSTAT_SYSFS_ROOT"]

    if "BONDSTAT_POLL_INTERVAL" in os.environ:
        try:
            config["poll_interval_sec"] = float(os.environ["BONDSTAT_POLL_INTERVAL"])
        except ValueError:
            log.warning("Invalid BONDSTAT_POLL_INTERVAL value: %s", os.environ["BONDSTAT_POLL_INTERVAL"])

    if "BONDSTAT_LISTEN_PORT" in os.environ:
        try:
            config["listen_port"] = int(os.environ["BONDSTAT_LISTEN_PORT"])
        except ValueError:
            log.warning("Invalid BONDSTAT_LISTEN_PORT value: %s", os.environ["BONDSTAT_LISTEN_PORT"])

    if "BONDSTAT_LOG_LEVEL" in os.environ:
        config["log_level"] = os.environ["BONDSTAT_LOG_LEVEL"]

    return config

def build_scheduler(cfg: Dict[str, Any], registry: CollectorRegistry) -> Scheduler:
    """
    Build the scheduler with all configured collectors.
    
    Args:
        cfg: Configuration as returned by load_config()
        registry: Registry the metrics are published to
        
    Returns:
        Scheduler ready for run_once()
    """
    options = {
        bonding.NAME: {"root": cfg["sysfs_root"], "namespace": cfg["namespace"]},
    }
    return Scheduler(FACTORIES, cfg["collectors"], registry,
                     options=options, namespace=cfg["namespace"])

def main() -> None:
    """
    Main application loop of the bonding exporter.
    
    This function:
    1. Loads configuration from YAML and environment variables
    2. Builds the enabled collectors on a private registry
    3. Serves the registry over HTTP for Prometheus to scrape
    4. Updates all collectors at the configured interval
    
    The loop runs indefinitely until interrupted.
    """

    # load config and initialize objects
    cfg = load_config()
    logging.basicConfig(level=str(cfg["log_level"]).upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    interval = float(cfg["poll_interval_sec"])

    registry = CollectorRegistry()
    scheduler = build_scheduler(cfg, registry)
    start_http_server(int(cfg["listen_port"]), registry=registry)
    log.info("Serving metrics on :%s, interval %.1fs", cfg["listen_port"], interval)

    while True:
        scheduler.run_once()
        time.sleep(interval)

if __name__ == "__main__":
    main()
