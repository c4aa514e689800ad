"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging e valida as
configurações obrigatórias antes do serviço aceitar tráfego.

Uso:
    from app.bootstrap import initialize_app, validate_runtime_settings

    initialize_app()
    validate_runtime_settings()
"""

from __future__ import annotations

import logging

from app.infra.crypto import SignatureVerifier
from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import get_base_settings, get_messenger_settings
from utils.errors import ConfigurationError

# Nome do serviço para logs
SERVICE_NAME = "messenger_connector"

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação com logging JSON estruturado e correlation_id.

    Deve ser chamada uma vez no início do serviço.
    """
    configure_logging(
        level=get_base_settings().log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (nível DEBUG)."""
    configure_logging(
        level="DEBUG",
        service_name=f"{SERVICE_NAME}_test",
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    - App Secret ausente em produção: ConfigurationError (sem assinatura
      nenhum webhook pode ser autenticado).
    - App Secret presente: constrói um SignatureVerifier para falhar cedo
      com algoritmos desconhecidos.
    - Demais problemas: falha em staging/production, só alerta em
      development.

    Raises:
        ConfigurationError: Se configuração inválida para o ambiente
    """
    base = get_base_settings()
    messenger = get_messenger_settings()
    environment = base.environment

    if base.is_production and not messenger.app_secret:
        raise ConfigurationError("MESSENGER_APP_SECRET é obrigatório em produção")

    if messenger.app_secret:
        SignatureVerifier(messenger.app_secret, messenger.signature_algorithms)

    errors = [f"base: {error}" for error in base.validate()]
    errors.extend(f"messenger: {error}" for error in messenger.validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if environment in STRICT_VALIDATION_ENVS:
        details = "\n".join(f"- {error}" for error in errors)
        raise ConfigurationError(f"Configuração inválida para {environment}:\n{details}")
