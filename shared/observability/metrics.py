from prometheus_client import Counter, Histogram

# Business Metrics
ecomm_orders_created_total = Counter(
    "ecomm_orders_created_total",
    "Order creation attempts",
    ["status"]  # Labels: 'success', 'rejected', 'failed'
)

ecomm_order_create_duration_seconds = Histogram(
    "ecomm_order_create_duration_seconds",
    "Order creation duration in seconds (validation + atomic write)"
)

ecomm_cache_requests_total = Counter(
    "ecomm_cache_requests_total",
    "Cache-aside lookups",
    ["namespace", "result"]  # Labels: result='hit', 'miss', 'error'
)

ecomm_remote_lookup_total = Counter(
    "ecomm_remote_lookup_total",
    "Cross-service entity lookups",
    ["entity", "outcome"]  # Labels: outcome='found', 'absent', 'error'
)
