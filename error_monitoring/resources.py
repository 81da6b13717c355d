"""
Process resource snapshots for health reports.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

import psutil

from utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ResourceUsage:
    """Point-in-time resource usage of the monitored process."""
    process_memory_mb: float
    process_cpu_percent: float
    thread_count: int
    system_memory_percent: float
    captured_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'process_memory_mb': round(self.process_memory_mb, 2),
            'process_cpu_percent': self.process_cpu_percent,
            'thread_count': self.thread_count,
            'system_memory_percent': self.system_memory_percent,
            'captured_at': self.captured_at.isoformat(),
        }


def capture_resource_usage() -> Optional[ResourceUsage]:
    """Sample the current process. Returns None if sampling fails."""
    try:
        process = psutil.Process()
        with process.oneshot():
            memory_mb = process.memory_info().rss / (1024 * 1024)
            cpu_percent = process.cpu_percent()
            thread_count = process.num_threads()

        return ResourceUsage(
            process_memory_mb=memory_mb,
            process_cpu_percent=cpu_percent,
            thread_count=thread_count,
            system_memory_percent=psutil.virtual_memory().percent,
        )

    except Exception as e:
        logger.warning(f"Failed to capture resource usage: {e}")
        return None
