"""
Notification sink.

Notifications are rows in the same database as the dispatch data. Callers
inside a dispatch transaction use ``emit_best_effort`` so a failing
notification is logged and rolled back to its savepoint without aborting
the surrounding work.
"""
import logging

from django.db import transaction

from notifications.models import Notification

logger = logging.getLogger(__name__)

STATUS_UPDATE_MESSAGES = {
    'accepted': (
        'Order Accepted',
        "Your order #{order} has been accepted by driver {driver} and is being prepared for pickup.",
    ),
    'picked_up': (
        'Order Picked Up',
        "Your order #{order} has been picked up by driver {driver} and is on the way!",
    ),
    'in_transit': (
        'Order In Transit',
        "Your order #{order} is now in transit and heading to your location.",
    ),
    'delivered': (
        'Order Delivered!',
        "Great news! Your order #{order} has been successfully delivered. Thank you for choosing us!",
    ),
}


def create_notification(*, user_type, title, description, href='', recipient=None,
                        notification_type='', order=None):
    notification = Notification.objects.create(
        recipient=recipient,
        user_type=user_type,
        notification_type=notification_type,
        title=title,
        description=description,
        href=href,
        order=order,
    )
    logger.debug(f"Notification {notification.pk} '{title}' queued for {user_type} {recipient or '(all)'}")
    return notification


def emit_best_effort(label, func, *args, **kwargs):
    """
    Run ``func`` inside a savepoint; log and return None if it fails.
    """
    try:
        with transaction.atomic():
            return func(*args, **kwargs)
    except Exception:
        logger.exception(f"Best-effort step '{label}' failed")
        return None


def notify_driver_new_delivery(driver, order, shop):
    if driver.user_id is None:
        logger.info(f"Driver {driver.driver_id} has no linked user; skipping delivery notification")
        return None
    return create_notification(
        recipient=driver.user,
        user_type='driver',
        notification_type='new_delivery',
        title='New Delivery Assigned',
        description=(
            f"You have a new delivery request for order #{order.order_number} "
            f"from {shop.name} to {order.customer_name}."
        ),
        href='/driver/assignments',
        order=order,
    )


def notify_customer_driver_assigned(order, driver):
    if order.customer_id is None:
        return None
    return create_notification(
        recipient=order.customer,
        user_type='customer',
        notification_type='driver_assigned',
        title='Driver Assigned to Your Order',
        description=(
            f"Good news! Driver {driver.name} has been assigned to deliver your order "
            f"#{order.order_number}. Driver contact: {driver.phone or 'n/a'}"
        ),
        href=f"/orders/{order.order_number}",
        order=order,
    )


def notify_customer_status_update(order, status, driver_name=None):
    if order.customer_id is None or status not in STATUS_UPDATE_MESSAGES:
        return None
    title, template = STATUS_UPDATE_MESSAGES[status]
    return create_notification(
        recipient=order.customer,
        user_type='customer',
        notification_type='order_status',
        title=title,
        description=template.format(order=order.order_number, driver=driver_name or 'your assigned driver'),
        href=f"/orders/{order.order_number}",
        order=order,
    )
