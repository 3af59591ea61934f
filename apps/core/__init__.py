"""
Core app: users, role capabilities and the activity log.
"""
