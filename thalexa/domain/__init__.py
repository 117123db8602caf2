"""
Domain layer - entities and value objects with no I/O.
"""
