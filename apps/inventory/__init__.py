"""
Inventory app: product categories and stocked products.
"""
