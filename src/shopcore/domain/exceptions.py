"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the presentation layer can catch them uniformly and display
user-friendly messages.  None of them should ever crash the process.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity (cart line, order, product) does not exist."""


class EmptyCartError(DomainException):
    """Checkout was attempted with nothing in the cart."""


class InsufficientStockError(DomainException):
    """Requested quantity exceeds what is available for a product."""

    def __init__(
        self,
        product_id: str,
        product_name: str,
        requested: int,
        available: int,
    ) -> None:
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {product_name} "
            f"(requested {requested}, only {available} available)"
        )

    @property
    def shortfall(self) -> int:
        return self.requested - self.available


class InvalidTransitionError(DomainException):
    """An order status change is not allowed from the current status."""

    def __init__(self, current: str, requested: str, reason: str = "") -> None:
        self.current = current
        self.requested = requested
        message = f"Cannot move order from {current} to {requested}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InternalInconsistencyError(DomainException):
    """Reservation bookkeeping no longer adds up.

    Signals a defect rather than a user mistake.  Still returned to the
    caller as an ordinary error after being logged.
    """
