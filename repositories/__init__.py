"""
repositories/ - Data Access Layer
==================================
A single generic repository builds parameterized SQL for any table.
Per-entity modules only supply the table name, the key column and the
functions mapping rows to domain model objects and back.
"""
