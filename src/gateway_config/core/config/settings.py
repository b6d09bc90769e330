# src/gateway_config/core/config/settings.py
"""
Configurações do próprio loader, lidas do ambiente do processo.

Variáveis reconhecidas:
    - GATEWAY_CONFIG_FILE        → caminho do arquivo base (default: ./tree-gateway)
    - GATEWAY_ENV                → nome do ambiente de deploy (overlay)
    - GATEWAY_RESET_BEFORE_START → limpa o store antes de buscar o gateway
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class LoaderSettings:
    config_file: Optional[str] = None
    environment: Optional[str] = None
    reset_before_start: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LoaderSettings":
        if environ is None:
            environ = os.environ
        return cls(
            config_file=environ.get("GATEWAY_CONFIG_FILE") or None,
            environment=environ.get("GATEWAY_ENV") or None,
            reset_before_start=environ.get("GATEWAY_RESET_BEFORE_START", "").strip().lower() in _TRUTHY,
        )
