"""
Persistence adapters. Services depend on these instead of the ORM session.
"""
