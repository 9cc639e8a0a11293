"""Database Metadata — SQLAlchemy Base, naming convention, timestamp mixin.

Invariants:
    - Engines and sessions live in infrastructure/database.py, never here
"""
