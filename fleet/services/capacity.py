"""
Capacity policy: how many active deliveries a driver may hold at once.

``max_active_orders`` is a pure function of the vehicle type and a mapping
of raw setting values, so it can be evaluated against any settings
snapshot. ``load_capacity_settings`` reads the current snapshot from the
database.
"""
import logging
from typing import Mapping, Optional

from core.models import SystemSetting

logger = logging.getLogger(__name__)

CAPACITY_SETTING_PREFIX = 'capacity_limit_'

DEFAULT_CAPACITY_LIMITS = {
    'motorbike': 3,
    'car': 5,
    'van': 10,
    'truck': 20,
}

# Vehicle types without a default or an override
UNKNOWN_VEHICLE_CAPACITY = 1


def capacity_setting_key(vehicle_type: str) -> str:
    return f"{CAPACITY_SETTING_PREFIX}{vehicle_type}"


def parse_capacity_limit(raw) -> Optional[int]:
    """Parse a stored limit; None when it is not a non-negative integer."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    if value < 0:
        return None
    return value


def max_active_orders(vehicle_type: str, settings: Optional[Mapping[str, str]] = None) -> int:
    """
    Maximum number of non-terminal assignments for a driver of ``vehicle_type``.

    A parsable ``capacity_limit_<vehicle_type>`` entry in ``settings`` wins;
    otherwise the default for the vehicle type applies.
    """
    settings = settings or {}
    key = capacity_setting_key(vehicle_type)
    if key in settings:
        limit = parse_capacity_limit(settings[key])
        if limit is not None:
            return limit
        logger.warning(f"Ignoring unparsable capacity setting {key}={settings[key]!r}")
    return DEFAULT_CAPACITY_LIMITS.get(vehicle_type, UNKNOWN_VEHICLE_CAPACITY)


def effective_capacity_limits(settings: Optional[Mapping[str, str]] = None) -> dict:
    return {vehicle_type: max_active_orders(vehicle_type, settings) for vehicle_type in DEFAULT_CAPACITY_LIMITS}


def load_capacity_settings() -> dict:
    return SystemSetting.as_mapping(prefix=CAPACITY_SETTING_PREFIX)


def driver_capacity(driver, settings: Optional[Mapping[str, str]] = None) -> int:
    if settings is None:
        settings = load_capacity_settings()
    return max_active_orders(driver.vehicle_type, settings)


def save_capacity_limits(limits: Mapping[str, int], updated_by: str = '') -> dict:
    """Upsert ``capacity_limit_*`` rows and return the effective limits."""
    for vehicle_type, limit in limits.items():
        SystemSetting.objects.update_or_create(
            key=capacity_setting_key(vehicle_type),
            defaults={
                'value': str(limit),
                'description': f"Maximum active orders for {vehicle_type} drivers",
                'updated_by': updated_by,
            },
        )
        logger.info(f"Capacity limit for {vehicle_type} set to {limit} by {updated_by or 'system'}")
    return effective_capacity_limits(load_capacity_settings())
