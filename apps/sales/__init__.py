"""
Sales app: completed sales and recorded profit entries.
"""
