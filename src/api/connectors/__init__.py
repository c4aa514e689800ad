"""Connectors por canal — adapters de borda para APIs externas.

Estrutura:
- messenger/: Messenger Platform (Graph API)
"""

__all__: list[str] = []
