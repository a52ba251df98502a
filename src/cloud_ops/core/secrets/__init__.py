"""Secret store clients."""

from .vault import VaultClient, create_vault_client

__all__ = [
    "VaultClient",
    "create_vault_client",
]
