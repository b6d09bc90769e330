# src/gateway_config/core/config/interpolation.py
"""
Variable Interpolator — substituição de variáveis de ambiente.

Percorre recursivamente dicionários e listas e, em cada folha string,
substitui toda ocorrência do token `{NOME}` pelo valor de `NOME` no
ambiente informado.

Política (v1):
    - NOME segue `[A-Za-z_][A-Za-z0-9_]*`
    - Variável não definida → o token literal é preservado
      (nunca substituído por string vazia)
    - Folhas não-string e strings sem token não são alteradas

Invariantes:
    - A estrutura de entrada não é mutada
    - O ambiente do processo nunca é alterado
"""

import os
import re
from typing import Any, Mapping, Optional


ENV_TOKEN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def interpolate_string(value: str, environ: Mapping[str, str]) -> str:
    """Substitui tokens `{NOME}` em uma única string."""

    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name in environ:
            return environ[name]
        return match.group(0)

    return ENV_TOKEN.sub(_replace, value)


def interpolate_env(value: Any, environ: Optional[Mapping[str, str]] = None) -> Any:
    """
    Retorna uma cópia de `value` com as variáveis de ambiente resolvidas.

    Args:
        value: Estrutura de configuração (dict, list ou folha).
        environ: Mapa de variáveis. Default: `os.environ`.

    Returns:
        Any: Nova estrutura com as folhas string interpoladas.
    """
    if environ is None:
        environ = os.environ

    if isinstance(value, dict):
        return {k: interpolate_env(v, environ) for k, v in value.items()}
    if isinstance(value, list):
        return [interpolate_env(v, environ) for v in value]
    if isinstance(value, str):
        return interpolate_string(value, environ)
    return value
