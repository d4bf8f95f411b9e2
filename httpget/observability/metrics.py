"""Metrics collection for HTTP transfers."""

from dataclasses import dataclass, field
from typing import ClassVar

from httpget.errors import ErrorClass


@dataclass
class TransferMetrics:
    """Metrics for HTTP transfers.

    Singleton class that tracks connection counts, response statuses,
    redirects, body bytes and failures.
    """

    connections_total: int = 0
    responses_total: dict[int, int] = field(default_factory=dict)
    redirects_total: int = 0
    body_bytes_total: int = 0
    failures_total: dict[str, int] = field(default_factory=dict)
    duration_ms_total: float = 0.0

    _instance: ClassVar["TransferMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "TransferMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_connection(self) -> None:
        """Record an opened connection."""
        self.connections_total += 1

    def record_response(self, status_code: int) -> None:
        """Record a parsed response.

        Args:
            status_code: HTTP status code.
        """
        self.responses_total[status_code] = (
            self.responses_total.get(status_code, 0) + 1
        )

    def record_redirect(self) -> None:
        """Record a followed redirect."""
        self.redirects_total += 1

    def record_body_bytes(self, count: int) -> None:
        """Record body bytes handed to the caller.

        Args:
            count: Number of bytes read.
        """
        self.body_bytes_total += count

    def record_failure(self, error_class: ErrorClass) -> None:
        """Record a failed request or read.

        Args:
            error_class: Classification of the failure.
        """
        key = error_class.value
        self.failures_total[key] = self.failures_total.get(key, 0) + 1

    def record_duration(self, duration_ms: float) -> None:
        """Record request duration.

        Args:
            duration_ms: Duration in milliseconds.
        """
        self.duration_ms_total += duration_ms

    def to_dict(self) -> dict[str, int | float | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "connections_total": self.connections_total,
            "responses_total": dict(self.responses_total),
            "redirects_total": self.redirects_total,
            "body_bytes_total": self.body_bytes_total,
            "failures_total": dict(self.failures_total),
            "duration_ms_total": self.duration_ms_total,
        }
