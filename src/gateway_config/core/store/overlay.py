# src/gateway_config/core/store/overlay.py
"""
Store Overlay — reconciliação do subtree `gateway` com o store.

Política (v1):
    - valor persistido presente → merge com precedência do store
      (chaves persistidas vencem, o arquivo local preenche lacunas);
      o resultado é validado e `protocol` é obrigatório
    - valor persistido ausente e sem gateway local → gateway default
      sintetizado a partir do template, com `jwtSecret` aleatório,
      persistido e registrado com um novo marcador de versão
    - valor persistido ausente com gateway local → valor local aceito,
      sem escrita no store

Decisões arquiteturais:
    - Único estágio do pipeline autorizado a fazer I/O no store
    - Falhas do backend são encapsuladas em `StoreError`
    - Nenhuma mutação da configuração recebida: retorna um novo gateway

Limites explícitos:
    - Não implementa o backend de persistência
    - Não resolve caminhos nem interpola variáveis
"""

from __future__ import annotations

import hashlib
import json
import logging
import uuid
from typing import Any, Awaitable, Dict, Optional, TypeVar

from ..config.bootstrap import GATEWAY_TEMPLATE, load_template
from ..config.errors import StoreError
from ..config.merge import Precedence, deep_merge
from ..config.validation import GatewayValidator, validate_gateway_config
from .base import ConfigStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def gateway_version(gateway: Dict[str, Any]) -> str:
    """
    Marcador de versão do gateway: SHA-256 do JSON canônico.

    Chaves ordenadas e separadores compactos tornam o marcador
    independente da ordem de escrita das chaves.
    """
    payload = json.dumps(gateway, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def default_gateway_config() -> Dict[str, Any]:
    """Gateway default do template, com segredo administrativo novo."""
    gateway = load_template(GATEWAY_TEMPLATE)
    admin = gateway.setdefault("admin", {})
    admin.setdefault("userService", {})["jwtSecret"] = str(uuid.uuid4())
    return gateway


class StoreOverlay:
    """Aplica o valor persistido do gateway sobre a configuração local."""

    def __init__(
        self,
        store: ConfigStore,
        *,
        gateway_validator: Optional[GatewayValidator] = None,
    ):
        self.store = store
        self.gateway_validator = gateway_validator

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError(f"ConfigStore {operation} failed: {exc}") from exc

    async def apply(
        self,
        local_gateway: Optional[Dict[str, Any]],
        *,
        reset: bool = False,
    ) -> Dict[str, Any]:
        """
        Retorna o gateway reconciliado e validado.

        Args:
            local_gateway: Subtree `gateway` resolvido dos arquivos (ou None).
            reset: Limpa o store antes da busca.

        Raises:
            StoreError: Falha de comunicação com o store.
            MissingProtocolError: `protocol` ausente após o merge.
            ConfigValidationError: Violação estrutural do gateway.
        """
        if reset:
            logger.info("Resetting configuration store before start")
            await self._call("flush", self.store.flush())

        stored = await self._call("get_gateway", self.store.get_gateway())

        if stored is not None:
            gateway = deep_merge(local_gateway or {}, stored, precedence=Precedence.RIGHT)
            return validate_gateway_config(gateway, extra=self.gateway_validator)

        if local_gateway is None:
            logger.info("No configuration for gateway was found. Using default configuration and saving it on store.")
            gateway = validate_gateway_config(default_gateway_config(), extra=self.gateway_validator)
            await self._call("save_gateway", self.store.save_gateway(gateway))
            await self._call(
                "register_gateway_version",
                self.store.register_gateway_version(gateway_version(gateway)),
            )
            return gateway

        return validate_gateway_config(dict(local_gateway), extra=self.gateway_validator)
