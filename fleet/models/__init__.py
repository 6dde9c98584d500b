from .core import Driver, DriverLocation
from .employee import Employee

__all__ = ['Driver', 'DriverLocation', 'Employee']
