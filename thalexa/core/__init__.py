"""
Core module - Cross-cutting concerns for Thalexa.

Contains:
- interfaces/: Abstract interfaces for dependency injection
- di/: Dependency injection container
- config/: Application configuration
- exceptions/: Custom exceptions
"""
