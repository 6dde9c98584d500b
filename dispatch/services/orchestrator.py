"""
Dispatch orchestration: assign a driver and an origin shop to an order.

All writes happen in one transaction. Inventory and notifications run in
savepoints inside it; they may fail without undoing the dispatch, except
in strict inventory mode where a shortfall rejects the whole request.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import Q
from django.utils import timezone

from assignment.models import DriverAssignment
from assignment.services.ledger import check_capacity, count_active, create_assignment
from core.locations import location_from
from dispatch.exceptions import InsufficientStockError, MissingFieldsError, NotFoundError, TransactionError
from dispatch.models import DispatchRecord
from fleet.services.capacity import load_capacity_settings
from fleet.services.resolver import resolve_driver
from fleet.services.status_services import refresh_driver_status
from notifications.services import emit_best_effort, notify_customer_driver_assigned, notify_driver_new_delivery
from orders.models import ORDER_FLOW, EcommerceOrder
from shops.models import Shop
from shops.services.inventory import InventoryShortfall, reduce_for_order, restock_for_order

logger = logging.getLogger(__name__)


@dataclass
class DispatchOutcome:
    record: DispatchRecord
    assignment: DriverAssignment
    inventory_shortfalls: List[InventoryShortfall] = field(default_factory=list)
    inventory_applied: bool = True
    driver_notified: bool = False
    customer_notified: bool = False
    cancelled_assignments: int = 0


def _blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _lookup(model, identifier, code_field):
    identifier = str(identifier).strip()
    lookup = Q(**{code_field: identifier})
    if identifier.isdigit():
        lookup |= Q(pk=int(identifier))
    return model.objects.select_for_update().filter(lookup).order_by('pk').first()


def find_order(order_id) -> Optional[EcommerceOrder]:
    return _lookup(EcommerceOrder, order_id, 'order_number')


def find_shop(shop_id) -> Optional[Shop]:
    return _lookup(Shop, shop_id, 'code')


def _move_inventory(previous_shop, shop, items):
    if previous_shop is not None:
        restock_for_order(previous_shop, items)
    return reduce_for_order(shop, items)


def _reduce_inventory(shop, order, strict, previous_shop=None):
    """
    Take the order's lines out of ``shop``.

    On re-dispatch from another shop the lines are first returned to
    ``previous_shop``; lines already taken from ``shop`` are not taken again.
    """
    items = list(order.items.all())
    if strict:
        result = _move_inventory(previous_shop, shop, items)
        if result.shortfalls:
            raise InsufficientStockError(result.shortfalls)
        return result
    return emit_best_effort('inventory decrement', _move_inventory, previous_shop, shop, items)


def assign_dispatch(order_id, driver_id, shop_id, tracking_number, estimated_delivery_time=None,
                    transport_cost=None, notes='', requested_by='', strict_inventory=None) -> DispatchOutcome:
    """
    Dispatch ``order_id`` from ``shop_id`` with ``driver_id``.

    Raises ``MissingFieldsError``, ``NotFoundError``, ``CapacityExceededError``,
    ``InvalidTransitionError`` or ``InsufficientStockError`` for rejected
    requests and ``TransactionError`` when the database write fails. No
    changes persist when an error is raised.
    """
    required = (
        ('orderId', order_id),
        ('driverId', driver_id),
        ('shopId', shop_id),
        ('trackingNumber', tracking_number),
    )
    missing = [name for name, value in required if _blank(value)]
    if missing:
        logger.warning(f"Dispatch rejected, missing fields: {missing}")
        raise MissingFieldsError(missing)

    if strict_inventory is None:
        strict_inventory = settings.DISPATCH_STRICT_INVENTORY
    tracking_number = str(tracking_number).strip()

    try:
        with transaction.atomic():
            order = find_order(order_id)
            if order is None:
                logger.warning(f"Dispatch rejected, order {order_id} not found")
                raise NotFoundError('order', order_id)

            driver = resolve_driver(driver_id)
            if driver is None:
                logger.warning(f"Dispatch rejected, driver {driver_id} not found")
                raise NotFoundError('driver', driver_id)

            shop = find_shop(shop_id)
            if shop is None:
                logger.warning(f"Dispatch rejected, shop {shop_id} not found")
                raise NotFoundError('shop', shop_id)

            capacity_settings = load_capacity_settings()
            check_capacity(driver, capacity_settings, exclude_order=order)
            ORDER_FLOW.check(order.status, 'in_transit')

            already_assigned = order.driver_assignments.active().count()
            previous_shop = order.shop if order.shop_id not in (None, shop.pk) else None
            now = timezone.now()
            assignment = create_assignment(
                driver,
                order,
                created_by=requested_by,
                pickup=location_from(shop.latitude, shop.longitude, shop.name),
                delivery=order.delivery_location,
                capacity_settings=capacity_settings,
                notes=notes,
            )
            record = DispatchRecord.objects.create(
                order=order,
                driver=assignment.driver,
                shop=shop,
                assignment=assignment,
                tracking_number=tracking_number,
                estimated_delivery_time=estimated_delivery_time,
                transport_cost=transport_cost,
                notes=notes or '',
                status='assigned',
                created_by=requested_by or '',
            )
            order.mark_dispatched(shop, tracking_number, dispatch_time=now)
            refresh_driver_status(assignment.driver, count_active(assignment.driver))

            inventory = _reduce_inventory(shop, order, strict_inventory, previous_shop=previous_shop)

            driver_note = emit_best_effort(
                'driver notification', notify_driver_new_delivery, assignment.driver, order, shop
            )
            customer_note = emit_best_effort(
                'customer notification', notify_customer_driver_assigned, order, assignment.driver
            )
            if customer_note is not None:
                DriverAssignment.objects.filter(pk=assignment.pk).update(notification_sent=True)
                assignment.notification_sent = True
    except DatabaseError as e:
        logger.exception(f"Dispatch of order {order_id} failed while writing")
        raise TransactionError(details={'reason': str(e)}) from e

    outcome = DispatchOutcome(
        record=record,
        assignment=assignment,
        inventory_shortfalls=inventory.shortfalls if inventory is not None else [],
        inventory_applied=inventory is not None,
        driver_notified=driver_note is not None,
        customer_notified=customer_note is not None,
        cancelled_assignments=already_assigned,
    )
    logger.info(
        f"Order {order.order_number} dispatched from {shop.code} with driver {assignment.driver.driver_id} "
        f"(tracking {tracking_number}, shortfalls {len(outcome.inventory_shortfalls)})"
    )
    return outcome
