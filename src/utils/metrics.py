"""Prometheus metrics for observability."""

import time
from collections import defaultdict
from dataclasses import dataclass, field

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


def _label_key(names: tuple[str, ...], labels: dict[str, str]) -> tuple[str, ...]:
    return tuple(labels.get(n, "") for n in names)


def _format_labels(names: tuple[str, ...], values: tuple[str, ...]) -> str:
    return ",".join(f'{n}="{v}"' for n, v in zip(names, values))


@dataclass
class Counter:
    """Simple counter metric."""

    name: str
    help: str
    labels: tuple[str, ...] = ()
    _values: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))

    def inc(self, amount: float = 1.0, **labels: str) -> None:
        """Increment the counter."""
        self._values[_label_key(self.labels, labels)] += amount

    def get(self, **labels: str) -> float:
        """Get counter value."""
        return self._values[_label_key(self.labels, labels)]

    def render(self) -> list[str]:
        lines = [f"# HELP {self.name} {self.help}", f"# TYPE {self.name} counter"]
        for values, value in self._values.items():
            if self.labels:
                lines.append(f"{self.name}{{{_format_labels(self.labels, values)}}} {value}")
            else:
                lines.append(f"{self.name} {value}")
        return lines


@dataclass
class Gauge:
    """Simple gauge metric."""

    name: str
    help: str
    labels: tuple[str, ...] = ()
    _values: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))

    def inc(self, amount: float = 1.0, **labels: str) -> None:
        """Increment the gauge."""
        self._values[_label_key(self.labels, labels)] += amount

    def dec(self, amount: float = 1.0, **labels: str) -> None:
        """Decrement the gauge."""
        self._values[_label_key(self.labels, labels)] -= amount

    def get(self, **labels: str) -> float:
        """Get gauge value."""
        return self._values[_label_key(self.labels, labels)]

    def render(self) -> list[str]:
        lines = [f"# HELP {self.name} {self.help}", f"# TYPE {self.name} gauge"]
        for values, value in self._values.items():
            if self.labels:
                lines.append(f"{self.name}{{{_format_labels(self.labels, values)}}} {value}")
            else:
                lines.append(f"{self.name} {value}")
        return lines


@dataclass
class Histogram:
    """Simple histogram metric with predefined buckets."""

    name: str
    help: str
    labels: tuple[str, ...] = ()
    buckets: tuple[float, ...] = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
    _counts: dict[tuple, dict[float, int]] = field(
        default_factory=lambda: defaultdict(lambda: defaultdict(int))
    )
    _sums: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))
    _totals: dict[tuple, int] = field(default_factory=lambda: defaultdict(int))

    def observe(self, value: float, **labels: str) -> None:
        """Observe a value."""
        key = _label_key(self.labels, labels)
        self._sums[key] += value
        self._totals[key] += 1
        for bucket in self.buckets:
            if value <= bucket:
                self._counts[key][bucket] += 1

    def render(self) -> list[str]:
        lines = [f"# HELP {self.name} {self.help}", f"# TYPE {self.name} histogram"]
        for values in self._sums.keys():
            label_str = _format_labels(self.labels, values)
            prefix = f"{label_str}," if label_str else ""
            # Buckets are already cumulative: observe() counts every bucket >= value
            for bucket in self.buckets:
                count = self._counts[values].get(bucket, 0)
                lines.append(f'{self.name}_bucket{{{prefix}le="{bucket}"}} {count}')
            lines.append(f'{self.name}_bucket{{{prefix}le="+Inf"}} {self._totals[values]}')
            plain = f"{{{label_str}}}" if label_str else ""
            lines.append(f"{self.name}_sum{plain} {self._sums[values]}")
            lines.append(f"{self.name}_count{plain} {self._totals[values]}")
        return lines


class MetricsRegistry:
    """Registry for all metrics."""

    def __init__(self) -> None:
        # HTTP metrics
        self.http_requests_total = Counter(
            name="http_requests_total",
            help="Total number of HTTP requests",
            labels=("method", "path", "status"),
        )
        self.http_request_duration_seconds = Histogram(
            name="http_request_duration_seconds",
            help="HTTP request duration in seconds",
            labels=("method", "path"),
        )
        self.http_requests_in_progress = Gauge(
            name="http_requests_in_progress",
            help="Number of HTTP requests in progress",
            labels=("method",),
        )

        # GitHub profile lookups
        self.github_lookups_total = Counter(
            name="github_lookups_total",
            help="Total number of GitHub profile lookups by outcome",
            labels=("outcome",),
        )
        self.github_lookup_duration_seconds = Histogram(
            name="github_lookup_duration_seconds",
            help="GitHub profile lookup duration in seconds",
        )

    def format_prometheus(self) -> str:
        """Format all metrics in Prometheus exposition format."""
        lines: list[str] = []
        for metric in self.__dict__.values():
            if isinstance(metric, (Counter, Gauge, Histogram)):
                lines.extend(metric.render())
        return "\n".join(lines) + "\n"


# Global metrics registry
metrics = MetricsRegistry()


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP metrics."""

    async def dispatch(self, request: Request, call_next) -> Response:
        method = request.method
        path = self._normalize_path(request.url.path)

        metrics.http_requests_in_progress.inc(method=method)

        start_time = time.monotonic()
        status = "500"
        try:
            response = await call_next(request)
            status = str(response.status_code)
        finally:
            duration = time.monotonic() - start_time
            metrics.http_requests_total.inc(method=method, path=path, status=status)
            metrics.http_request_duration_seconds.observe(duration, method=method, path=path)
            metrics.http_requests_in_progress.dec(method=method)

        return response

    def _normalize_path(self, path: str) -> str:
        """Normalize path for metric labels (replace IDs with placeholders)."""
        return "/".join(":id" if part.isdigit() else part for part in path.split("/"))
