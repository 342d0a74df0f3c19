from enum import Enum


class StockPolicy(Enum):
    """How a call site wants over-stock quantity requests handled."""
    CLAMP = "CLAMP"    # Reduce the quantity to the available stock (default)
    REJECT = "REJECT"  # Refuse the mutation and report the available stock
