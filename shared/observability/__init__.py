from .setup import setup_observability
from .metrics import (
    ecomm_orders_created_total,
    ecomm_order_create_duration_seconds,
    ecomm_cache_requests_total,
    ecomm_remote_lookup_total
)
