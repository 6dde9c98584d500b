"""
Shop inventory ledger.

Stock is decremented with a single conditional UPDATE so concurrent
dispatches can never push a counter below zero. A line that cannot be
covered is reported as a shortfall instead of being partially applied.
"""
import logging
from dataclasses import dataclass, field
from typing import List

from django.db.models import F
from django.utils import timezone

from shops.models import ShopInventory

logger = logging.getLogger(__name__)


@dataclass
class InventoryShortfall:
    product_variant_id: str
    requested: int
    available: int

    def as_dict(self):
        return {
            'product_variant_id': self.product_variant_id,
            'requested': self.requested,
            'available': self.available,
        }


@dataclass
class InventoryResult:
    decremented: List[str] = field(default_factory=list)
    shortfalls: List[InventoryShortfall] = field(default_factory=list)

    @property
    def complete(self):
        return not self.shortfalls


def available_stock(shop, product_variant_id) -> int:
    stock = (
        ShopInventory.objects
        .filter(shop=shop, product_variant_id=product_variant_id)
        .values_list('stock', flat=True)
        .first()
    )
    return stock or 0


def decrement_stock(shop, product_variant_id, quantity) -> bool:
    """
    Remove ``quantity`` units of a variant from a shop's stock.

    Returns False, leaving the row untouched, when the shop holds fewer
    units than requested or has no row for the variant.
    """
    if quantity <= 0:
        return True
    updated = (
        ShopInventory.objects
        .filter(shop=shop, product_variant_id=product_variant_id, stock__gte=quantity)
        .update(stock=F('stock') - quantity, updated_at=timezone.now())
    )
    return updated == 1


def increment_stock(shop, product_variant_id, quantity) -> bool:
    """Return ``quantity`` units of a variant to a shop; False when it has no row for it."""
    if quantity <= 0:
        return True
    updated = (
        ShopInventory.objects
        .filter(shop=shop, product_variant_id=product_variant_id)
        .update(stock=F('stock') + quantity, updated_at=timezone.now())
    )
    return updated == 1


def reduce_for_order(shop, items) -> InventoryResult:
    """
    Decrement stock for every order line; uncovered lines become shortfalls.

    Lines already taken out of stock by an earlier dispatch are skipped, so
    dispatching the same order again never counts its units twice.
    """
    result = InventoryResult()
    for item in items:
        if item.stock_reduced:
            continue
        if decrement_stock(shop, item.product_variant_id, item.quantity):
            item.stock_reduced = True
            item.save(update_fields=['stock_reduced'])
            result.decremented.append(item.product_variant_id)
            continue
        shortfall = InventoryShortfall(
            product_variant_id=item.product_variant_id,
            requested=item.quantity,
            available=available_stock(shop, item.product_variant_id),
        )
        logger.warning(
            f"Shop {shop.code} cannot cover {shortfall.requested} x {shortfall.product_variant_id} "
            f"(available {shortfall.available})"
        )
        result.shortfalls.append(shortfall)
    return result


def restock_for_order(shop, items) -> List[str]:
    """Give back every line ``reduce_for_order`` took from ``shop``."""
    restocked = []
    for item in items:
        if not item.stock_reduced:
            continue
        if not increment_stock(shop, item.product_variant_id, item.quantity):
            logger.warning(f"Shop {shop.code} has no row for {item.product_variant_id}; recreating it on restock")
            ShopInventory.objects.create(
                shop=shop, product_variant_id=item.product_variant_id, stock=item.quantity
            )
        item.stock_reduced = False
        item.save(update_fields=['stock_reduced'])
        restocked.append(item.product_variant_id)
    if restocked:
        logger.info(f"Returned {len(restocked)} line(s) to shop {shop.code}")
    return restocked
