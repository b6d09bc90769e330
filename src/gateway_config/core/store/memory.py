# src/gateway_config/core/store/memory.py
"""Store em memória (processo único, testes)."""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, List, Optional


class InMemoryConfigStore:
    """ConfigStore mantido em memória; valores são copiados na entrada e na saída."""

    def __init__(self, gateway: Optional[Dict[str, Any]] = None):
        self._gateway = deepcopy(gateway)
        self._version: Optional[str] = None
        self.versions: List[str] = []

    async def get_gateway(self) -> Optional[Dict[str, Any]]:
        return deepcopy(self._gateway)

    async def save_gateway(self, gateway: Dict[str, Any]) -> None:
        self._gateway = deepcopy(gateway)

    async def register_gateway_version(self, version: str) -> None:
        self._version = version
        self.versions.append(version)

    async def get_gateway_version(self) -> Optional[str]:
        return self._version

    async def flush(self) -> None:
        self._gateway = None
        self._version = None
