from .assignment import AssignmentStatusSerializer, DriverAssignmentSerializer
