"""
Errors raised by the dispatch orchestrator.

Each error carries the HTTP status the API answers with. Capacity errors
are raised by the assignment ledger and re-exported here.
"""
from rest_framework import status

from assignment.exceptions import CapacityExceededError
from core.exceptions import ServiceError

__all__ = [
    'CapacityExceededError',
    'DispatchError',
    'DispatchValidationError',
    'InsufficientStockError',
    'MissingFieldsError',
    'NotFoundError',
    'TransactionError',
]


class DispatchError(ServiceError):
    default_message = 'Failed to assign driver'


class DispatchValidationError(DispatchError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Invalid dispatch request'


class MissingFieldsError(DispatchValidationError):
    default_message = 'Order ID, Driver ID, Shop ID, and Tracking Number are required'

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(details={'missing': self.missing})


class NotFoundError(DispatchError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity, identifier=None):
        self.entity = entity
        self.identifier = identifier
        super().__init__(
            f"{entity.capitalize()} not found",
            details={'entity': entity, 'id': identifier},
        )


class InsufficientStockError(DispatchValidationError):
    default_message = 'Shop does not hold enough stock for this order'

    def __init__(self, shortfalls):
        self.shortfalls = list(shortfalls)
        super().__init__(details={'shortfalls': [s.as_dict() for s in self.shortfalls]})


class TransactionError(DispatchError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'Dispatch could not be saved; no changes were applied'
