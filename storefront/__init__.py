"""
Storefront service: product orders, prototyping requests and 3D-print quotes.
"""
__version__ = "0.1.0"
