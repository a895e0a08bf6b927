"""Custom exceptions for the OrderDesk application."""

class OrderDeskError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv

class BusinessLogicError(OrderDeskError):
    """Exception raised for business logic violations."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)

class InvalidReferenceError(BusinessLogicError):
    """Raised when a request references a customer or variant that does not exist."""
    def __init__(self, entity, entity_id):
        message = f"{entity} {entity_id} does not exist"
        super().__init__(message, status_code=400, payload={'field': entity.lower(), 'id': entity_id})

class NotFoundError(OrderDeskError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)

class InsufficientStockError(BusinessLogicError):
    """Raised when a decrement would drive stock below zero."""
    def __init__(self, variant_sku, required, available):
        req_fmt = f"{int(required)}" if required % 1 == 0 else f"{required:f}".rstrip('0').rstrip('.')
        avail_fmt = f"{int(available)}" if available % 1 == 0 else f"{available:f}".rstrip('0').rstrip('.')
        message = f"Insufficient stock for {variant_sku}: {req_fmt} required, {avail_fmt} available"
        super().__init__(message, status_code=409)

class StockConflictError(OrderDeskError):
    """Raised when stock changed between the read and the write of a reconciliation."""
    def __init__(self, variant_id, expected=None, actual=None):
        message = f"Stock for variant {variant_id} was modified concurrently"
        payload = {'variant_id': variant_id}
        if expected is not None:
            payload['expected'] = str(expected)
            payload['actual'] = str(actual)
        super().__init__(message, 409, payload)
        # A mismatch seen before writing can be re-read and retried in the same transaction
        self.retryable = expected is not None

class InvalidTransitionError(OrderDeskError):
    """Raised when a procurement status change is not a forward move."""
    def __init__(self, current, requested):
        message = f"Cannot move procurement from {current} to {requested}"
        super().__init__(message, 409, {'current': current, 'requested': requested})
