"""API — camada de borda e adapters de canais.

Responsabilidades:
- Receber webhooks da Messenger Platform
- Validar assinaturas e payloads
- Chamar a Graph API (Send/Profile API)

Subpastas:
- connectors/: adapters HTTP por canal
- routes/: endpoints HTTP (webhooks, health)
"""
