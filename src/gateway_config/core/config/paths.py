# src/gateway_config/core/config/paths.py
"""
Path Defaulter — defaults e resolução de caminhos relativos.

Regras aplicadas, em ordem:
    1. `rootPath` ausente → diretório do arquivo de configuração base
    2. `rootPath` relativo → resolvido contra o diretório do arquivo
    3. `middlewarePath` ausente → `rootPath/middleware`
    4. `middlewarePath` relativo → resolvido contra `rootPath`
    5. `gateway.protocol.https.privateKey` / `certificate` relativos
       → resolvidos contra `rootPath`

Os âncoras das regras 2 e 4 são distintos e não devem ser confundidos.

"Relativo" significa começar com `.`; valores absolutos ou já
preenchidos por default não são alterados.
"""

import os
from typing import Any, Dict


def _is_relative(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(".")


def _join(anchor: str, value: str) -> str:
    return os.path.normpath(os.path.join(anchor, value))


def resolve_tls_paths(server: Dict[str, Any]) -> Dict[str, Any]:
    """Resolve chave privada e certificado HTTPS relativos contra `rootPath`."""
    https = ((server.get("gateway") or {}).get("protocol") or {}).get("https")
    if not isinstance(https, dict):
        return server

    root_path = server["rootPath"]
    for field in ("privateKey", "certificate"):
        if _is_relative(https.get(field)):
            https[field] = _join(root_path, https[field])
    return server


def apply_path_defaults(server: Dict[str, Any], config_base: str) -> Dict[str, Any]:
    """
    Preenche `rootPath`/`middlewarePath` e resolve caminhos relativos.

    Args:
        server: Configuração do servidor (já interpolada). Não é mutada.
        config_base: Caminho base do arquivo de configuração (sem extensão).

    Returns:
        Dict[str, Any]: Nova configuração com caminhos absolutos.
    """
    server = dict(server)
    if isinstance(server.get("gateway"), dict):
        # cópia rasa até `https`, única subárvore alterada aqui
        gateway = dict(server["gateway"])
        if isinstance(gateway.get("protocol"), dict):
            protocol = dict(gateway["protocol"])
            if isinstance(protocol.get("https"), dict):
                protocol["https"] = dict(protocol["https"])
            gateway["protocol"] = protocol
        server["gateway"] = gateway

    config_dir = os.path.dirname(os.path.abspath(config_base))

    if not server.get("rootPath"):
        server["rootPath"] = config_dir
    if _is_relative(server["rootPath"]):
        server["rootPath"] = _join(config_dir, server["rootPath"])

    if not server.get("middlewarePath"):
        server["middlewarePath"] = os.path.join(server["rootPath"], "middleware")
    if _is_relative(server["middlewarePath"]):
        server["middlewarePath"] = _join(server["rootPath"], server["middlewarePath"])

    return resolve_tls_paths(server)
