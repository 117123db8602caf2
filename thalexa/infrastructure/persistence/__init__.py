"""
Persistence layer - Data storage implementations.

Contains:
- json_state_repository: JSON file-based state snapshot storage
"""

from thalexa.infrastructure.persistence.json_state_repository import JsonStateRepository

__all__ = ["JsonStateRepository"]
