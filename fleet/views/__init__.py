from .capacity import CapacityLimitsView
from .driver import DriverViewSet
