# src/gateway_config/core/store/base.py
"""
Interface de capacidade do store de configuração.

Chaves lógicas persistidas:
    - configuração corrente do gateway (blob)
    - marcador de versão da configuração do gateway

Implementações devem levantar exceções próprias em falhas de backend;
o Store Overlay as encapsula em `StoreError`.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class ConfigStore(Protocol):
    """Acesso assíncrono ao gateway persistido."""

    async def get_gateway(self) -> Optional[Dict[str, Any]]:
        """Retorna o gateway persistido, ou None se nunca foi salvo."""
        ...

    async def save_gateway(self, gateway: Dict[str, Any]) -> None:
        ...

    async def register_gateway_version(self, version: str) -> None:
        ...

    async def get_gateway_version(self) -> Optional[str]:
        ...

    async def flush(self) -> None:
        """Remove todo o conteúdo do store."""
        ...
