from .driver import (
    CapacityLimitsSerializer,
    DriverDetailSerializer,
    DriverLocationSerializer,
    DriverSerializer,
    EmployeeSerializer,
)
