"""
Data Module
"""
from .generators import DataGenerator, OrderGenerator, ProductGenerator, with_engagement

__all__ = [
    "DataGenerator",
    "OrderGenerator",
    "ProductGenerator",
    "with_engagement",
]
