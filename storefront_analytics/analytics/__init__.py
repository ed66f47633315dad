"""
Analytics Module

Read-only business analytics over the storefront's products and orders.
"""
from .engine import AnalyticsEngine, AnalyticsFilters
from .exceptions import (
    AnalyticsError,
    DataAccessError,
    InvalidFilterError,
    InvalidIdentifierError,
)
from .ports import OrderCriteria, RecordAccessPort

__all__ = [
    "AnalyticsEngine",
    "AnalyticsFilters",
    "AnalyticsError",
    "DataAccessError",
    "InvalidFilterError",
    "InvalidIdentifierError",
    "OrderCriteria",
    "RecordAccessPort",
]
