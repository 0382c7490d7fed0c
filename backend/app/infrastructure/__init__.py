"""Infrastructure Layer — database, repositories, authentication, logging.

Invariants:
    - Infrastructure may import core/ types and errors, never services/ or api/
    - All SQLAlchemy failures surface as core.errors.DatabaseError
"""
