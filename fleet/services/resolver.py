"""
Driver lookup for dispatch requests.

Callers may identify a driver by primary key, driver code, linked user
(id or username) or employee id. When no driver record matches, an active
employee of the drivers department is promoted to a driver record.
"""
import logging

from django.conf import settings
from django.db.models import Q

from fleet.models import Driver, Employee

logger = logging.getLogger(__name__)

AUTO_VEHICLE_TYPE = 'car'


def _driver_lookups(identifier):
    if identifier.isdigit():
        yield Q(pk=int(identifier))
    yield Q(driver_id=identifier)
    if identifier.isdigit():
        yield Q(user_id=int(identifier))
    yield Q(employee__employee_id=identifier)
    yield Q(user__username=identifier)


def find_driver(identifier):
    for lookup in _driver_lookups(identifier):
        driver = Driver.objects.filter(lookup).first()
        if driver is not None:
            return driver
    return None


def find_driver_employee(identifier):
    lookup = Q(employee_id=identifier) | Q(user__username=identifier)
    if identifier.isdigit():
        lookup |= Q(pk=int(identifier)) | Q(user_id=int(identifier))
    return (
        Employee.objects
        .filter(is_active=True, department__iexact=settings.DRIVER_DEPARTMENT_NAME)
        .filter(lookup)
        .order_by('pk')
        .first()
    )


def create_driver_from_employee(employee):
    existing = Driver.objects.filter(employee=employee).first()
    if existing is not None:
        return existing

    user = employee.user
    if user is not None and Driver.objects.filter(user=user).exists():
        user = None

    driver = Driver.objects.create(
        driver_id=f"DRV-{employee.employee_id}",
        name=employee.full_name,
        phone=employee.phone,
        license_plate=f"AUTO-{employee.employee_id}",
        vehicle_type=AUTO_VEHICLE_TYPE,
        status='available',
        employee=employee,
        user=user,
    )
    logger.info(f"Created driver {driver.driver_id} from employee {employee.employee_id}")
    return driver


def resolve_driver(identifier, create_missing=True):
    """
    Return the driver for ``identifier`` or None.

    With ``create_missing`` an eligible employee gets a driver record; run
    it inside the caller's transaction so a failed dispatch discards it.
    """
    identifier = str(identifier or '').strip()
    if not identifier:
        return None

    driver = find_driver(identifier)
    if driver is not None:
        return driver

    employee = find_driver_employee(identifier)
    if employee is None:
        logger.debug(f"No driver or drivers-department employee matches '{identifier}'")
        return None
    if not create_missing:
        return None
    return create_driver_from_employee(employee)
