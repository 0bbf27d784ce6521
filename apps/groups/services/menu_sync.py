"""
Menu sync service.

Order items store a snapshot of the menu entry's name and price. When the
creator edits the menu, changes are pushed into those snapshots so member
orders keep matching the menu. Items created before product links existed
carry no product id; they are matched by the product's previous name.
"""

import logging
from typing import Iterable, List, Optional

from django.db import transaction
from django.db.models import Q

from apps.groups.models import Group, Product
from apps.orders.models import OrderItem

from .exceptions import InvalidGroupDataError, ProductInUseError

logger = logging.getLogger(__name__)


def clean_product_entry(entry: dict) -> dict:
    """
    Validate one incoming menu entry.

    Returns:
        Dict with id (or None), stripped name and integer price

    Raises:
        InvalidGroupDataError: On empty name or missing/negative price
    """
    name = (entry.get('name') or '').strip()
    if not name:
        raise InvalidGroupDataError("Product name is required")

    price = entry.get('price')
    if isinstance(price, bool) or not isinstance(price, int) or price < 0:
        raise InvalidGroupDataError(f'Product "{name}" needs a non-negative integer price')

    return {'id': entry.get('id'), 'name': name, 'price': price}


def _propagate_product_change(*, group: Group, product: Product, old_name: str) -> int:
    """Overwrite order item snapshots for a renamed or repriced product."""
    linked = OrderItem.objects.filter(order__group=group, product=product).update(
        name=product.name,
        price=product.price,
    )
    legacy = OrderItem.objects.filter(
        order__group=group,
        product__isnull=True,
        name=old_name,
    ).update(
        name=product.name,
        price=product.price,
        product=product,
    )
    return linked + legacy


@transaction.atomic
def sync_menu(*, group: Group, products: Iterable[dict]) -> List[Product]:
    """
    Make the group's menu match the incoming product list.

    Entries with an id edit that product; entries without one create a new
    product. Stored products missing from the list are removed, unless an
    order item in the group still refers to them by id or exact name, in
    which case nothing is changed.

    Args:
        group: Group whose menu is edited (should be locked by the caller)
        products: List of {id?, name, price}

    Returns:
        The group's products after sync, ordered by id

    Raises:
        InvalidGroupDataError: On invalid entries, foreign or duplicate ids
        ProductInUseError: If a product to remove has been ordered
    """
    entries = [clean_product_entry(entry) for entry in products or []]
    stored = {product.id: product for product in group.products.all()}

    incoming_ids = set()
    for entry in entries:
        product_id: Optional[int] = entry['id']
        if product_id is None:
            continue
        if product_id not in stored:
            raise InvalidGroupDataError(f"Product {product_id} does not belong to this group")
        if product_id in incoming_ids:
            raise InvalidGroupDataError(f"Product {product_id} appears more than once")
        incoming_ids.add(product_id)

    to_delete = [product for pid, product in stored.items() if pid not in incoming_ids]

    if to_delete:
        in_use = (
            OrderItem.objects
            .filter(order__group=group)
            .filter(
                Q(product_id__in=[p.id for p in to_delete]) |
                Q(name__in=[p.name for p in to_delete])
            )
            .values_list('product_id', 'name')
        )
        used_ids = set()
        used_names = set()
        for product_id, name in in_use:
            used_ids.add(product_id)
            used_names.add(name)
        for product in to_delete:
            if product.id in used_ids or product.name in used_names:
                logger.warning(
                    "Group %s: refused to remove ordered product %s (%s)",
                    group.id, product.id, product.name
                )
                raise ProductInUseError(product.name)

    updated = 0
    created = []
    for entry in entries:
        if entry['id'] is None:
            created.append(Product(group=group, name=entry['name'], price=entry['price']))
            continue

        product = stored[entry['id']]
        if product.name == entry['name'] and product.price == entry['price']:
            continue

        old_name = product.name
        product.name = entry['name']
        product.price = entry['price']
        product.save(update_fields=['name', 'price', 'updated_at'])
        _propagate_product_change(group=group, product=product, old_name=old_name)
        updated += 1

    if created:
        Product.objects.bulk_create(created)

    if to_delete:
        Product.objects.filter(id__in=[p.id for p in to_delete]).delete()

    logger.info(
        "Group %s menu synced: created=%d updated=%d deleted=%d",
        group.id, len(created), updated, len(to_delete)
    )

    return list(Product.objects.filter(group=group).order_by('id'))
