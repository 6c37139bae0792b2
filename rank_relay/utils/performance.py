"""
Performance monitoring for relayed queries.

Provides utilities for timing each stage of a query and logging the result.
Metrics are only logged, never written to disk.
"""

import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from rank_relay.config import settings
from rank_relay.utils.logger import logger


@dataclass
class QueryMetrics:
    """Container for query performance metrics."""

    query: str
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    response_time_ms: float = 0.0
    fetch_time_ms: Optional[float] = None
    assistant_time_ms: Optional[float] = None
    records_found: int = 0
    status: str = "success"
    response_length: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


class PerformanceTracker:
    """
    Tracks and logs performance metrics for queries.

    Provides methods for creating, formatting, and logging metrics.
    """

    def __init__(self, enabled: Optional[bool] = None) -> None:
        """
        Initialize performance tracker.

        Args:
            enabled: Whether tracking is enabled (default from config)
        """
        self._enabled = enabled if enabled is not None else settings.logging.enable_performance_tracking

    @property
    def enabled(self) -> bool:
        """Check if performance tracking is enabled."""
        return self._enabled

    @staticmethod
    def start_timer() -> float:
        """Start a performance timer using perf_counter for precision."""
        return time.perf_counter()

    def create_metrics(
        self,
        query: str,
        start_time: float,
        fetch_time: Optional[float] = None,
        assistant_time: Optional[float] = None,
        records_found: int = 0,
        status: str = "success",
        response: Optional[str] = None
    ) -> QueryMetrics:
        """
        Create a metrics object for a query.

        Args:
            query: User query
            start_time: Timer start value from start_timer()
            fetch_time: Time spent fetching the CSV (seconds)
            assistant_time: Time spent on the assistant round-trip (seconds)
            records_found: Number of rank records sent to the assistant
            status: Query status (success, no_data, error)
            response: Assistant answer text

        Returns:
            QueryMetrics instance
        """
        total_time = time.perf_counter() - start_time

        return QueryMetrics(
            query=query,
            response_time_ms=round(total_time * 1000, 2),
            fetch_time_ms=round(fetch_time * 1000, 2) if fetch_time is not None else None,
            assistant_time_ms=round(assistant_time * 1000, 2) if assistant_time is not None else None,
            records_found=records_found,
            status=status,
            response_length=len(response) if response else 0
        )

    def log_metrics(self, metrics: QueryMetrics) -> None:
        """Write metrics to the log when tracking is enabled."""
        if not self._enabled:
            return
        logger.info(self.format_console_output(metrics).replace("\n", " | "))

    def format_console_output(self, metrics: QueryMetrics) -> str:
        """
        Format metrics for console display.

        Args:
            metrics: QueryMetrics instance

        Returns:
            Formatted string
        """
        lines = [
            "Performance Metrics:",
            f"  Total time: {metrics.response_time_ms / 1000:.2f}s"
        ]

        if metrics.fetch_time_ms is not None:
            lines.append(f"  - Sheet fetch: {metrics.fetch_time_ms / 1000:.2f}s")
        if metrics.assistant_time_ms is not None:
            lines.append(f"  - Assistant: {metrics.assistant_time_ms / 1000:.2f}s")

        lines.append(f"  Records: {metrics.records_found}")
        lines.append(f"  Status: {metrics.status}")

        return "\n".join(lines)
