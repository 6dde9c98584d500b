from .assignment import ASSIGNMENT_FLOW, TERMINAL_STATUSES, DriverAssignment

__all__ = ['ASSIGNMENT_FLOW', 'TERMINAL_STATUSES', 'DriverAssignment']
