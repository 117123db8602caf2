"""
Dependency injection module.
"""

from thalexa.core.di.container import DIContainer

__all__ = ["DIContainer"]
