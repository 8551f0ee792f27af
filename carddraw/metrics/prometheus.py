# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics, single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "carddraw_requests_total",
    "Total HTTP requests to the card draw service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "carddraw_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "carddraw_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
ALLOCATIONS_TOTAL = Counter(
    "carddraw_allocations_total",
    "Total successful card draws",
    ["role"],
)
FORCED_REPEATS = Counter(
    "carddraw_forced_repeats_total",
    "Draws that had to repeat the card held on the previous occurrence",
)
ALLOCATION_FAILURES = Counter(
    "carddraw_allocation_failures_total",
    "Refused card draws",
    ["reason"],
)
RESETS_TOTAL = Counter(
    "carddraw_resets_total",
    "Total bulk resets of the assignment history",
)
STORED_ASSIGNMENTS = Gauge(
    "carddraw_stored_assignments",
    "Number of assignments currently stored",
)
