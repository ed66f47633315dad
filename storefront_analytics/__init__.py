"""
Storefront Analytics

Analytics and inventory intelligence service for a small retail storefront.
"""

__version__ = "1.0.0"
