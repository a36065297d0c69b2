"""
db/ - Database Layer
====================
Connection providers, SQL dialects, schema initialization and the error
taxonomy shared by the layers above.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
