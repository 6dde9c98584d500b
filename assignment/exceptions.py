from rest_framework import status

from core.exceptions import ServiceError


class CapacityExceededError(ServiceError):
    """The driver already holds as many active deliveries as the vehicle allows."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Driver is at capacity'

    def __init__(self, driver, limit, active_count):
        self.driver = driver
        self.limit = limit
        self.active_count = active_count
        super().__init__(
            f"Driver {driver.name} ({driver.vehicle_type}) already has maximum allowed orders ({limit}). "
            f"Current active orders: {active_count}",
            details={
                'driver_id': driver.driver_id,
                'vehicle_type': driver.vehicle_type,
                'max_active_orders': limit,
                'active_orders': active_count,
            },
        )
