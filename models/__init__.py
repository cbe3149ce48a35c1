"""
Models package for the typing test backend.

The pydantic data models here are shared with the client; the ``*_manager``
modules hold the database access and are only imported by the backend.
"""
