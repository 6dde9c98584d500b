"""
Driver assignment ledger.

Tracks which driver is delivering which order and enforces the capacity
limit at insert time. ``create_assignment`` takes the driver row lock
before counting, so the count and the insert cannot interleave with
another dispatch for the same driver.
"""
import logging

from django.db import transaction
from django.db.models import Count, Q

from assignment.exceptions import CapacityExceededError
from assignment.models import TERMINAL_STATUSES, DriverAssignment
from fleet.models import Driver
from fleet.services.capacity import driver_capacity
from fleet.services.status_services import refresh_driver_status
from notifications.services import emit_best_effort, notify_customer_status_update

logger = logging.getLogger(__name__)


def active_assignments(driver):
    return DriverAssignment.objects.active().filter(driver=driver)


def count_active(driver, exclude_order=None) -> int:
    queryset = active_assignments(driver)
    if exclude_order is not None:
        queryset = queryset.exclude(order=exclude_order)
    return queryset.count()


def with_active_counts(queryset):
    """Annotate a Driver queryset with ``active_order_count``."""
    return queryset.annotate(
        active_order_count=Count('assignments', filter=~Q(assignments__status__in=TERMINAL_STATUSES))
    )


def check_capacity(driver, capacity_settings=None, exclude_order=None):
    """Raise ``CapacityExceededError`` unless the driver can take one more order."""
    limit = driver_capacity(driver, capacity_settings)
    active = count_active(driver, exclude_order=exclude_order)
    if active >= limit:
        logger.warning(f"Driver {driver.driver_id} at capacity: {active}/{limit} active")
        raise CapacityExceededError(driver, limit, active)
    logger.info(f"Driver {driver.driver_id} capacity check passed: {active}/{limit} active")
    return limit, active


def cancel_active_for_order(order, exclude_driver=None):
    """
    Cancel every active assignment of ``order`` and refresh the drivers involved.

    Returns the cancelled assignments.
    """
    cancelled = []
    queryset = DriverAssignment.objects.active().filter(order=order).select_related('driver')
    if exclude_driver is not None:
        queryset = queryset.exclude(driver=exclude_driver)
    for assignment in queryset:
        assignment.transition_to('cancelled')
        refresh_driver_status(assignment.driver, count_active(assignment.driver))
        logger.info(f"Cancelled assignment {assignment.pk} of order {order.order_number} (driver {assignment.driver.driver_id})")
        cancelled.append(assignment)
    return cancelled


def create_assignment(driver, order, created_by, pickup, delivery, capacity_settings=None, notes=''):
    """
    Insert an ``assigned`` row for ``driver`` and ``order``.

    Any other active assignment of the order is cancelled first. Capacity is
    checked against the locked driver row; on ``CapacityExceededError`` the
    cancellations are rolled back with everything else.
    """
    with transaction.atomic():
        locked = Driver.objects.select_for_update().get(pk=driver.pk)
        cancel_active_for_order(order, exclude_driver=locked)
        check_capacity(locked, capacity_settings, exclude_order=order)

        # Re-dispatching the same driver replaces its previous assignment.
        for previous in active_assignments(locked).filter(order=order):
            previous.transition_to('cancelled')

        assignment = DriverAssignment(
            driver=locked,
            order=order,
            assigned_by=created_by or '',
            status='assigned',
            notes=notes or '',
        )
        assignment.set_locations(pickup, delivery)
        assignment.save()

    logger.info(f"Assignment {assignment.pk}: order {order.order_number} -> driver {locked.driver_id}")
    return assignment


def update_assignment_status(assignment, new_status, at=None):
    """
    Apply a status change reported by a driver or the dispatch desk.

    Delivered assignments complete their order; terminal states release the
    driver. Customers are notified of progress on a best-effort basis.
    """
    with transaction.atomic():
        assignment = (
            DriverAssignment.objects
            .select_for_update()
            .select_related('driver', 'order')
            .get(pk=assignment.pk)
        )
        if not assignment.transition_to(new_status, at=at):
            return assignment

        driver = assignment.driver
        order = assignment.order
        if new_status == 'delivered':
            order.mark_delivered(delivery_time=assignment.actual_delivery_time)

        refresh_driver_status(driver, count_active(driver))
        emit_best_effort(
            'status notification',
            notify_customer_status_update, order, new_status, driver.name,
        )

    logger.info(f"Assignment {assignment.pk} is now {new_status}")
    return assignment
