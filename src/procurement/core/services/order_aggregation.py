"""
Order line aggregation.

Collapses the requests of a lot into one line per material name, and
reconciles supplier-priced lines back onto those requests.
"""

from dataclasses import dataclass

from procurement.core.entities import OrderItem, PurchaseRequest, quantize_quantity
from procurement.core.exceptions import ValidationError


@dataclass
class PricedLine:
    """A supplier-confirmed line for one material."""

    material_name: str
    quantity: float
    unit_price: float


def aggregate_requests(requests: list[PurchaseRequest]) -> list[OrderItem]:
    """
    Sum request quantities per material name.

    The first request seen for a name supplies its unit and category;
    output keeps first-seen order.
    """
    items: dict[str, OrderItem] = {}
    for request in requests:
        item = items.get(request.material_name)
        if item is None:
            items[request.material_name] = OrderItem(
                material_name=request.material_name,
                unit=request.unit,
                category=request.category,
                quantity=request.quantity,
            )
        else:
            item.quantity = quantize_quantity(item.quantity + request.quantity)
    return list(items.values())


def validate_priced_lines(
    requests: list[PurchaseRequest], lines: list[PricedLine]
) -> None:
    """Check that priced lines cover exactly the lot's material names."""
    expected = {r.material_name for r in requests}
    seen: set[str] = set()
    for line in lines:
        if line.material_name in seen:
            raise ValidationError(
                "priced_items", "duplicate material line", line.material_name
            )
        seen.add(line.material_name)
        if line.quantity <= 0:
            raise ValidationError("quantity", "must be greater than 0", line.quantity)
        if line.unit_price < 0:
            raise ValidationError("unit_price", "must not be negative", line.unit_price)

    missing = expected - seen
    if missing:
        raise ValidationError(
            "priced_items", "missing lines for lot materials", sorted(missing)
        )
    extra = seen - expected
    if extra:
        raise ValidationError(
            "priced_items", "lines for materials not in the lot", sorted(extra)
        )


def apply_priced_quantities(
    requests: list[PurchaseRequest], lines: list[PricedLine]
) -> list[PurchaseRequest]:
    """
    Finalize request quantities from the priced lines.

    When a line's quantity differs from the sum of its requests, the
    difference lands on the most recently created request of that material.
    Returns the requests whose quantity changed.
    """
    by_name: dict[str, list[PurchaseRequest]] = {}
    for request in requests:
        by_name.setdefault(request.material_name, []).append(request)

    changed: list[PurchaseRequest] = []
    for line in lines:
        group = by_name[line.material_name]
        delta = quantize_quantity(line.quantity - sum(r.quantity for r in group))
        if delta == 0:
            continue
        target = max(group, key=lambda r: r.created_at)
        new_quantity = quantize_quantity(target.quantity + delta)
        if new_quantity <= 0:
            raise ValidationError(
                "quantity",
                f"priced quantity leaves request {target.id} with nothing to order",
                line.quantity,
            )
        target.set_quantity(new_quantity)
        changed.append(target)
    return changed


def build_order_items(
    requests: list[PurchaseRequest], lines: list[PricedLine]
) -> list[OrderItem]:
    """Aggregate the lot and apply supplier prices and quantities."""
    priced = {line.material_name: line for line in lines}
    items = aggregate_requests(requests)
    for item in items:
        line = priced[item.material_name]
        item.quantity = line.quantity
        item.unit_price = line.unit_price
    return items


def order_total(items: list[OrderItem]) -> float:
    return sum(item.line_total for item in items)
