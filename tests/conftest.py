from __future__ import annotations
from pathlib import Path

import pytest
from prometheus_client import CollectorRegistry

@pytest.fixture
def sysfs(tmp_path: Path) -> Path:
    return tmp_path / "net"

@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()
