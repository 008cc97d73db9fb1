"""
Prometheus metrics for the admin integrity backend.

Service timings come from the @measure_operation decorator; the domain counters
below track blocked-date mutations and audit trail health. Audit write
failures are swallowed by AuditService, so the failure counter is the signal
operators alert on.
"""

from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Create a custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "booking_admin_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "booking_admin_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "booking_admin_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

blocked_dates_changes_total = Counter(
    "booking_admin_blocked_dates_changes_total",
    "Blocked date rows inserted, skipped or removed",
    ["change"],  # inserted | skipped | removed
    registry=REGISTRY,
)

audit_writes_total = Counter(
    "booking_admin_audit_writes_total",
    "Audit records appended",
    ["table_name", "action"],
    registry=REGISTRY,
)

audit_write_failures_total = Counter(
    "booking_admin_audit_write_failures_total",
    "Audit records that could not be written",
    ["reason"],  # no_actor | persistence
    registry=REGISTRY,
)

audit_read_duration_seconds = Histogram(
    "booking_admin_audit_read_duration_seconds",
    "Audit log listing duration in seconds",
    registry=REGISTRY,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)


class PrometheusMetrics:
    """Manages Prometheus metrics collection and exposure."""

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'AvailabilityCalendarService')
            operation: Operation/method name (e.g., 'block_range')
            duration: Operation duration in seconds
            status: Operation status ('success' or 'error')
            error_type: Type of error if status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def record_blocked_dates_change(change: str, count: int = 1) -> None:
        if count > 0:
            blocked_dates_changes_total.labels(change=change).inc(count)

    @staticmethod
    def record_audit_write(table_name: str, action: str) -> None:
        audit_writes_total.labels(table_name=table_name, action=action).inc()

    @staticmethod
    def record_audit_write_failure(reason: str) -> None:
        audit_write_failures_total.labels(reason=reason).inc()

    @staticmethod
    def record_audit_read(duration: float) -> None:
        audit_read_duration_seconds.observe(duration)

    @staticmethod
    def get_metrics() -> bytes:
        """Generate the exposition payload for the /metrics endpoint."""
        return generate_latest(REGISTRY)

    @staticmethod
    def get_content_type() -> str:
        return CONTENT_TYPE_LATEST


prometheus_metrics = PrometheusMetrics()
