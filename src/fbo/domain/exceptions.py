"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the outer layers can catch them uniformly.  Admission failures carry a
machine-readable ``code`` and a ``details`` payload that is surfaced to the
caller verbatim.
"""

from __future__ import annotations

from typing import Any


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class AdmissionError(DomainException):
    """An order in a batch could not be admitted.

    ``order_index`` is the position of the failing order in the normalized
    batch; it is filled in by the admission handler.
    """

    code = "admission_failed"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = dict(details or {})
        self.order_index: int | None = None

    def to_details(self) -> dict[str, Any]:
        payload = {"code": self.code, **self.details}
        if self.order_index is not None:
            payload["orderIndex"] = self.order_index
        return payload


class NoOrdersError(AdmissionError):
    code = "no_orders"

    def __init__(self) -> None:
        super().__init__("Batch contains no orders")


class InvalidOrderError(AdmissionError):
    code = "invalid_order"

    def __init__(self, reason: str, received: Any = None) -> None:
        super().__init__(
            f"Invalid order: {reason}",
            {"reason": reason, "received": received},
        )


class InsufficientComponentError(AdmissionError):
    """A generic component lacks stock for the order."""

    def __init__(self, component: str, needed: int, available: int | None = None) -> None:
        details: dict[str, Any] = {"component": component, "needed": needed}
        if available is not None:
            details["available"] = available
        super().__init__(
            f"Insufficient {component} (need {needed}, have {available} available)"
            if available is not None
            else f"Insufficient {component} (need {needed})",
            details,
        )
        self.component = component
        self.code = f"insufficient_{component}"


class InsufficientBackModelError(AdmissionError):
    """No back-model record matched with enough stock.

    The details list every model-matching record with and without the
    furniture-type filter so an operator can tell a wrong type tag from a
    real shortage.
    """

    code = "insufficient_back_model"

    def __init__(
        self,
        model: str,
        requested: int,
        matches_with_furniture_type: list[dict[str, Any]],
        matches_any_furniture_type: list[dict[str, Any]],
    ) -> None:
        super().__init__(
            f"No back model '{model}' with {requested} available",
            {
                "model": model,
                "requested": requested,
                "matchesWithFurnitureType": matches_with_furniture_type,
                "matchesAnyFurnitureType": matches_any_furniture_type,
            },
        )


class TransactionsUnsupportedError(Exception):
    """The store cannot open a multi-record transaction.

    Raised when a transaction is requested on a standalone deployment,
    always before any write has happened.
    """
