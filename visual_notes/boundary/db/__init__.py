"""
Database boundary: ORM models, connection management and CRUD.
"""
