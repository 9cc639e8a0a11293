"""Infrastructure Layer — database sessions, logging, media storage.

Invariants:
    - Only infrastructure/ talks to the filesystem and the database engine directly
"""
