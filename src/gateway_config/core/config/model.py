# src/gateway_config/core/config/model.py
"""
ServerConfig — visão tipada da configuração resolvida.

Representação interna explícita da configuração após todos os estágios
do pipeline. O conteúdo de `database` e `gateway` é mantido como mapa
(schemas completos são externos).
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ServerConfig:
    """Configuração do servidor totalmente resolvida."""

    root_path: str
    middleware_path: str
    database: Dict[str, Any] = field(default_factory=dict)
    gateway: Optional[Dict[str, Any]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServerConfig":
        known = {"rootPath", "middlewarePath", "database", "gateway"}
        return cls(
            root_path=data["rootPath"],
            middleware_path=data["middlewarePath"],
            database=deepcopy(data.get("database") or {}),
            gateway=deepcopy(data.get("gateway")),
            extra={k: deepcopy(v) for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = deepcopy(self.extra)
        out.update(
            {
                "rootPath": self.root_path,
                "middlewarePath": self.middleware_path,
                "database": deepcopy(self.database),
            }
        )
        if self.gateway is not None:
            out["gateway"] = deepcopy(self.gateway)
        return out
