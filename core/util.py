from __future__ import annotations
import os, time
from typing import List

def now_ts() -> float:
    """
    Get current Unix timestamp.
    
    Returns:
        Current time as float seconds since epoch
    """
    return time.time()

def read_sysfs(path: str | os.PathLike) -> str:
    """
    Read a sysfs pseudo-file and strip surrounding whitespace.
    
    Args:
        path: Pseudo-file to read
        
    Returns:
        File content without leading/trailing whitespace (incl. newline)
        
    Raises:
        OSError: the file is missing or unreadable
    """
    # surrogateescape keeps non-UTF-8 interface names usable as paths
    with open(path, "r", encoding="utf-8", errors="surrogateescape") as f:
        return f.read().strip()

def read_fields(path: str | os.PathLike) -> List[str]:
    """
    Read a whitespace-separated list from a sysfs pseudo-file.
    
    Order and duplicates are kept as found in the file.
    """
    return read_sysfs(path).split()
