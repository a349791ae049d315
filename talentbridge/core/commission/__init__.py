"""Commission calculation module."""

from .commission_engine import (
    CommissionEngine,
    get_commission_engine,
)

__all__ = [
    "CommissionEngine",
    "get_commission_engine",
]
