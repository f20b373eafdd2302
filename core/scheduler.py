from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Iterable

from prometheus_client import CollectorRegistry, Gauge

from core.util import now_ts

log = logging.getLogger(__name__)

# name -> constructor(registry, **options)
Factory = Callable[..., Any]

class Scheduler:
    """
    Runs a fixed set of collectors once per cycle.
    
    Collectors are built from an explicit factory map handed in by the caller.
    A collector is any object with an update() method; an exception raised by
    update() marks that collector as failed for the cycle and is not re-raised.
    """

    def __init__(self,
                 factories: Dict[str, Factory],
                 enabled: Iterable[str],
                 registry: CollectorRegistry,
                 options: Dict[str, Dict[str, Any]] | None = None,
                 namespace: str = "") -> None:
        """
        Build all enabled collectors.
        
        Args:
            factories: Collector constructors keyed by collector name
            enabled: Names of collectors to build
            registry: Registry shared by collectors and scheduler metrics
            options: Extra constructor keyword arguments per collector name
            namespace: Metric name prefix for the scheduler's own gauges
            
        Raises:
            ValueError: an enabled name has no factory
        """
        options = options or {}
        self.collectors: Dict[str, Any] = {}
        for name in enabled:
            if name not in factories:
                raise ValueError(f"unknown collector: {name}")
            self.collectors[name] = factories[name](registry=registry, **options.get(name, {}))
            log.info("enabled collector %s", name)

        self.success = Gauge("scrape_collector_success",
                             "Whether a collector succeeded.",
                             labelnames=["collector"], namespace=namespace, registry=registry)
        self.duration = Gauge("scrape_collector_duration_seconds",
                              "Duration of a collector update.",
                              labelnames=["collector"], namespace=namespace, registry=registry)

    def run_once(self) -> Dict[str, bool]:
        """
        Update every collector once.
        
        Returns:
            Dictionary mapping collector name to success flag
        """
        results: Dict[str, bool] = {}
        for name, collector in self.collectors.items():
            start = now_ts()
            try:
                collector.update()
                ok = True
            except Exception as e:
                log.error("collector %s failed: %s", name, e)
                ok = False
            elapsed = now_ts() - start
            log.debug("collector %s finished in %.4fs (ok=%s)", name, elapsed, ok)
            self.duration.labels(name).set(elapsed)
            self.success.labels(name).set(1 if ok else 0)
            results[name] = ok
        return results
