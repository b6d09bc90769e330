"""
Utilitário canônico de deep-merge de configuração.

Este módulo implementa a política única de deep-merge compartilhada pelo
Environment Overlay (overlay vence a base) e pelo Store Overlay (valor
persistido vence o arquivo local).

Política de merge (v1):
    - dict + dict → merge recursivo por chave
    - chave presente no lado vencedor → valor do vencedor (lista, escalar
      ou dict com tipo diferente substituem integralmente)
    - chave ausente no lado vencedor → fallback para o outro lado

Princípios fundamentais:
    - O merge é determinístico e puramente funcional
    - Nenhum input é mutado durante o processo
    - A precedência é um parâmetro explícito, nunca inferida

Limites explícitos:
    - Não carrega arquivos de configuração
    - Não valida semântica de domínio
    - Não faz merge elemento a elemento de listas
"""

from copy import deepcopy
from enum import Enum
from typing import Any, Dict

from .errors import ConfigError


class Precedence(str, Enum):
    """Lado do merge cujas chaves presentes vencem."""

    LEFT = "left"
    RIGHT = "right"


def deep_merge(
    left: Dict[str, Any],
    right: Dict[str, Any],
    *,
    precedence: Precedence = Precedence.RIGHT,
) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre dois dicionários.

    O lado indicado por `precedence` é o vencedor: toda chave presente
    nele prevalece; chaves que ele omite são preenchidas pelo outro lado,
    recursivamente para dicionários aninhados.

    Decisões arquiteturais:
        - O merge é puramente funcional (inputs não são mutados)
        - Listas não são mescladas por índice
        - Conflito de tipos resolve para o lado vencedor

    Invariantes:
        - A estrutura retornada é sempre um novo dicionário
        - merge(a, b, RIGHT) == merge(b, a, LEFT)

    Args:
        left (Dict[str, Any]): Lado esquerdo (ex.: base ou arquivo local).
        right (Dict[str, Any]): Lado direito (ex.: overlay ou valor do store).
        precedence (Precedence): Lado cujas chaves presentes vencem.

    Returns:
        Dict[str, Any]: Nova configuração resultante do deep-merge.

    Raises:
        ConfigError: Se algum dos lados não for um dicionário.
    """
    if not isinstance(left, dict) or not isinstance(right, dict):
        raise ConfigError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(left).__name__} vs {type(right).__name__}"
        )

    if precedence is Precedence.RIGHT:
        winner, fallback = right, left
    else:
        winner, fallback = left, right

    return _merge(winner, fallback)


def _merge(winner: Dict[str, Any], fallback: Dict[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = deepcopy(fallback)

    for key, value in winner.items():
        current = result.get(key)

        # dict -> merge recursivo
        if isinstance(value, dict) and isinstance(current, dict):
            result[key] = _merge(value, current)
            continue

        result[key] = deepcopy(value)

    return result
