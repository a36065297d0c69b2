"""
models/ - Domain Models
=======================
Plain dataclasses for the records stored in the database.
"""
