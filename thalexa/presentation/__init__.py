"""
Presentation layer - state store and page routing consumed by views.
"""
