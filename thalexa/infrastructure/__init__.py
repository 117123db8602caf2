"""
Infrastructure layer - storage, ledger and identity provider implementations.
"""
