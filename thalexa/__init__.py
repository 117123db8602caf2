"""
Thalexa - wallet session and product ledger client core.
"""

__version__ = "0.1.0"
