"""Core domain services."""

from procurement.core.services.order_aggregation import (
    PricedLine,
    aggregate_requests,
    apply_priced_quantities,
    build_order_items,
    order_total,
    validate_priced_lines,
)
from procurement.core.services.stock_ledger import StockLedgerService

__all__ = [
    "StockLedgerService",
    "PricedLine",
    "aggregate_requests",
    "apply_priced_quantities",
    "build_order_items",
    "order_total",
    "validate_priced_lines",
]
