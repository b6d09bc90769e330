# src/gateway_config/core/config/loader.py
"""
Loader canônico da configuração local do servidor.

Este módulo encadeia os estágios locais do pipeline de resolução:

    Format Loader → Environment Overlay → Variable Interpolator
    → validação estrutural → Path Defaulter → Array Normalizer

A configuração é resolvida a partir de:
    - um arquivo base `<nome>.{yml,yaml,json}`
    - um overlay opcional `<nome>-<ambiente>.{yml,yaml,json}`
    - o Bootstrap Provider, quando nenhum dos dois existe

Princípios fundamentais:
    - O overlay de ambiente vence a base; chaves omitidas caem na base
    - Nenhum estágio acessa o store (responsabilidade do Store Overlay)
    - Erros estruturais são tratados como falhas fatais e detectados
      antes que os estágios de caminho e lista percorram a árvore

Invariantes:
    - O resultado é sempre um dicionário puro (`dict`)
    - `rootPath` e `middlewarePath` do resultado são absolutos
    - Overrides nunca mutam a base carregada

Limites explícitos:
    - Não reconcilia o subtree `gateway` com o store
    - Não mantém estado de ciclo de vida
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from .arrays import normalize_arrays
from .errors import ConfigValidationError
from .formats import load_config_object, strip_extension
from .interpolation import interpolate_env
from .merge import Precedence, deep_merge
from .paths import apply_path_defaults
from .validation import validate_server_config

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "tree-gateway"

# Chamado quando nem o arquivo base nem o overlay existem.
BootstrapFn = Callable[[], Dict[str, Any]]


@dataclass(frozen=True)
class LocalConfig:
    """Configuração local resolvida e o caminho base de onde veio."""

    base: str
    server: Dict[str, Any]


def resolve_config_base(config_file: Optional[str] = None, cwd: Optional[str] = None) -> str:
    """
    Normaliza o caminho do arquivo de configuração para um caminho base.

    - nome ausente → `<cwd>/tree-gateway`
    - espaços nas pontas são removidos
    - extensão `.yml`/`.yaml`/`.json` é removida
    - nome iniciando com `.` é resolvido contra `cwd`
    """
    cwd = cwd or os.getcwd()
    if not config_file or not config_file.strip():
        return os.path.join(cwd, DEFAULT_CONFIG_NAME)

    base = strip_extension(config_file.strip())
    if base.startswith("."):
        base = os.path.normpath(os.path.join(cwd, base))
    return base


def load_server_config(
    base: str,
    *,
    environment: Optional[str] = None,
    bootstrap: Optional[BootstrapFn] = None,
) -> Dict[str, Any]:
    """
    Carrega o arquivo base e aplica o overlay de ambiente.

    Args:
        base: Caminho base sem extensão.
        environment: Nome do ambiente de deploy (None/"" → sem overlay).
        bootstrap: Fábrica invocada quando nenhum arquivo existe.

    Returns:
        Dict[str, Any]: Configuração bruta (antes de interpolação).

    Raises:
        ConfigParseError: Se algum arquivo encontrado for malformado.
        ConfigValidationError: Se nada existir e não houver bootstrap.
        BootstrapInputError: Se o bootstrap falhar.
    """
    config = load_config_object(base)

    if environment:
        env_config = load_config_object(f"{base}-{environment}")
        if env_config is not None:
            logger.debug("Applying '%s' environment overlay on %s", environment, base)
            if config is None:
                config = env_config
            else:
                config = deep_merge(config, env_config, precedence=Precedence.RIGHT)

    if config is None:
        if bootstrap is None:
            raise ConfigValidationError(f"Nenhum arquivo de configuração encontrado para {base}")
        config = bootstrap()

    return config


def resolve_local_config(
    base: str,
    *,
    environment: Optional[str] = None,
    bootstrap: Optional[BootstrapFn] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> LocalConfig:
    """
    Executa todos os estágios locais e retorna a configuração resolvida.

    O subtree `gateway`, quando presente, ainda não foi reconciliado com o
    store nem validado como gateway completo.
    """
    raw = load_server_config(base, environment=environment, bootstrap=bootstrap)
    server = validate_server_config(interpolate_env(raw, environ))
    server = apply_path_defaults(server, base)
    server = normalize_arrays(server)
    return LocalConfig(base=base, server=server)
