"""
Resolve submitted line items against a group's menu.

Matched items take the menu's current name and price (any client-supplied
price is ignored) and keep a link to the product. Unmatched items become
custom entries with no product link.
"""

from typing import Iterable, List

from apps.groups.models import Product
from apps.orders.models import Order, OrderItem

from .exceptions import InvalidOrderItemError


def _to_int(value, *, field: str, minimum: int) -> int:
    if isinstance(value, bool):
        raise InvalidOrderItemError(f"Item {field} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidOrderItemError(f"Item {field} must be an integer")
    if number != value and not isinstance(value, str):
        # 1.5 must not truncate to 1
        raise InvalidOrderItemError(f"Item {field} must be an integer")
    if number < minimum:
        raise InvalidOrderItemError(f"Item {field} must be at least {minimum}")
    return number


def resolve_order_items(*, products: Iterable[Product], items: Iterable[dict]) -> List[dict]:
    """
    Turn raw item dicts into validated line item field dicts.

    Each raw item may carry ``product_id``, ``name``, ``price`` and
    ``quantity``. Resolution tries the product id first, then the exact
    name; otherwise the item is kept as a custom entry and must provide
    its own price.

    Args:
        products: The group's current menu
        items: Submitted items

    Returns:
        List of dicts with name, price, quantity and product (or None)

    Raises:
        InvalidOrderItemError: If quantity, name or custom price is invalid
    """
    products = list(products)
    by_id = {product.id: product for product in products}
    by_name = {}
    for product in products:
        by_name.setdefault(product.name, product)

    resolved = []
    for raw in items or []:
        quantity = _to_int(raw.get('quantity'), field='quantity', minimum=1)
        name = (raw.get('name') or '').strip()

        product = None
        product_id = raw.get('product_id')
        if product_id is not None:
            product = by_id.get(product_id)
        if product is None and name:
            product = by_name.get(name)

        if product is not None:
            resolved.append({
                'name': product.name,
                'price': product.price,
                'quantity': quantity,
                'product': product,
            })
            continue

        if not name:
            raise InvalidOrderItemError("Each item needs a name or a menu product")

        resolved.append({
            'name': name,
            'price': _to_int(raw.get('price'), field='price', minimum=0),
            'quantity': quantity,
            'product': None,
        })

    return resolved


def replace_order_items(*, order: Order, resolved_items: List[dict]) -> None:
    """Delete every line item of the order and insert the new set."""
    order.items.all().delete()
    OrderItem.objects.bulk_create([
        OrderItem(order=order, **fields) for fields in resolved_items
    ])
