"""
services/ - Business Logic Layer
================================
Services validate input and orchestrate calls to the repositories.
"""
