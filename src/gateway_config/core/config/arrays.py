# src/gateway_config/core/config/arrays.py
"""
Array Normalizer — coerção de escalar para lista de um elemento.

Permite que o usuário escreva um valor único onde a configuração espera
uma lista (ex.: `filter: a` em vez de `filter: [a]`).

Política (v1):
    - valor presente e não-lista → `[valor]`
    - valor já lista, ou caminho ausente → inalterado
    - a operação é idempotente
"""

from typing import Any, Dict, List


ARRAY_PATHS: List[str] = [
    "database.redis.cluster",
    "database.redis.sentinel.nodes",
    "gateway.filter",
    "gateway.admin.filter",
    "gateway.serviceDiscovery.provider",
    "gateway.logger.console.stderrLevels",
    "gateway.accessLogger.console.stderrLevels",
]

# Caminhos aplicados a cada entrada nomeada dos mapas `gateway.config.*`
CACHE_ENTRY_ARRAY_PATHS: List[str] = ["server.preserveHeaders"]
CORS_ENTRY_ARRAY_PATHS: List[str] = ["allowedHeaders", "exposedHeaders", "methods"]


def cast_array(obj: Any, path: str) -> None:
    """Envolve em lista o valor em `path` (notação pontuada), in-place."""
    keys = path.split(".")
    current = obj
    for key in keys[:-1]:
        if not isinstance(current, dict) or key not in current:
            return
        current = current[key]

    last = keys[-1]
    if not isinstance(current, dict) or last not in current:
        return
    if not isinstance(current[last], list):
        current[last] = [current[last]]


def _named_entries(server: Dict[str, Any], map_name: str) -> List[Any]:
    gateway = server.get("gateway")
    if not isinstance(gateway, dict):
        return []
    config = gateway.get("config")
    if not isinstance(config, dict):
        return []
    entries = config.get(map_name)
    if not isinstance(entries, dict):
        return []
    return list(entries.values())


def normalize_arrays(server: Dict[str, Any]) -> Dict[str, Any]:
    """
    Aplica `cast_array` a todos os caminhos conhecidos da configuração.

    Muta e retorna `server`.
    """
    for path in ARRAY_PATHS:
        cast_array(server, path)

    for entry in _named_entries(server, "cache"):
        for path in CACHE_ENTRY_ARRAY_PATHS:
            cast_array(entry, path)

    for entry in _named_entries(server, "cors"):
        for path in CORS_ENTRY_ARRAY_PATHS:
            cast_array(entry, path)

    return server
