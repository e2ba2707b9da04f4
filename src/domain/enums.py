"""Domain enumerations."""

import enum


class TripStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentMethod(str, enum.Enum):
    NEQUI = "nequi"
    DAVIPLATA = "daviplata"
    EFECTIVO = "efectivo"  # cash


# Declaration order is the order reported back to clients
PAYMENT_METHODS: tuple[str, ...] = tuple(m.value for m in PaymentMethod)
