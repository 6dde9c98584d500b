import logging

from django.utils import timezone

from fleet.models import Driver

logger = logging.getLogger(__name__)


def update_driver_status(driver: Driver, new_status: str):
    driver.status = new_status
    driver.updated_at = timezone.now()
    driver.save(update_fields=['status', 'updated_at'])


def mark_driver_available(driver: Driver):
    update_driver_status(driver, 'available')


def mark_driver_offline(driver: Driver):
    update_driver_status(driver, 'offline')


def refresh_driver_status(driver: Driver, active_count: int) -> str:
    """
    Derive busy/available from the number of active assignments.

    Offline drivers keep their status; going back online is a manual step.
    """
    if driver.is_offline:
        return driver.status
    new_status = 'busy' if active_count > 0 else 'available'
    if driver.status != new_status:
        logger.info(f"Driver {driver.driver_id} is now {new_status} ({active_count} active)")
        update_driver_status(driver, new_status)
    return new_status
