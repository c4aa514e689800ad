"""App — infraestrutura, bootstrap e entrypoint ASGI.

Subpastas:
- bootstrap/: composition root (logging, validação de settings)
- infra/: implementações concretas (crypto HMAC, cliente HTTP)
- observability/: correlation_id para logs estruturados

Padrão: app executa; api adapta; config configura; utils apoia.
"""
