# src/gateway_config/core/config/formats.py
"""
Format Loader — descoberta e parse de um arquivo de configuração.

Dado um caminho base sem extensão, tenta, nesta ordem fixa:

    <base>.yml → <base>.yaml → <base>.json

e retorna o conteúdo do primeiro arquivo existente. Nenhum merge ocorre
aqui: é um parse puro de fonte única.

Decisões arquiteturais:
    - A ordem de extensões é fixa e não configurável
    - Arquivos vazios são interpretados como dicionários vazios
    - Conteúdo malformado é erro fatal (`ConfigParseError`)

Limites explícitos:
    - Não aplica overlay de ambiente
    - Não interpola variáveis
    - Não valida semântica de domínio
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union
import json

import yaml  # PyYAML

from .errors import ConfigParseError


CONFIG_EXTENSIONS = (".yml", ".yaml", ".json")


def strip_extension(file_name: str) -> str:
    """Remove uma extensão `.yml`/`.yaml`/`.json` final (case-insensitive)."""
    lower = file_name.lower()
    for ext in CONFIG_EXTENSIONS:
        if lower.endswith(ext):
            return file_name[: -len(ext)]
    return file_name


def find_config_file(base: Union[str, Path]) -> Optional[Path]:
    """Retorna o primeiro `<base><ext>` existente, ou None."""
    base = str(base)
    for ext in CONFIG_EXTENSIONS:
        candidate = Path(base + ext)
        if candidate.is_file():
            return candidate
    return None


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo de configuração e valida o tipo raiz.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)

    Invariantes:
        - O retorno é sempre um dicionário
        - Nenhuma mutação ocorre fora do escopo da função

    Args:
        path (Path): Caminho para o arquivo de configuração.

    Returns:
        Dict[str, Any]: Conteúdo do arquivo carregado como dicionário.

    Raises:
        ConfigParseError: Se o conteúdo for malformado ou a raiz não for dict.
    """
    suffix = path.suffix.lower()

    try:
        with path.open("r", encoding="utf-8") as f:
            if suffix in {".yaml", ".yml"}:
                data = yaml.safe_load(f)
            else:
                text = f.read()
                data = json.loads(text) if text.strip() else None
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigParseError(f"Arquivo de configuração malformado: {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigParseError(f"Falha ao ler arquivo de configuração: {path}: {exc}") from exc

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigParseError(
            f"Config root deve ser dict em {path}, recebido: {type(data).__name__}"
        )

    return data


def load_config_object(base: Union[str, Path]) -> Optional[Dict[str, Any]]:
    """
    Carrega a configuração do primeiro arquivo encontrado para `base`.

    Args:
        base: Caminho base sem extensão.

    Returns:
        Optional[Dict[str, Any]]: Conteúdo parseado, ou None se nenhum
        dos três formatos existir.

    Raises:
        ConfigParseError: Se o arquivo encontrado for malformado.
    """
    path = find_config_file(base)
    if path is None:
        return None
    return _load_file(path)


def dump_config_object(path: Union[str, Path], data: Dict[str, Any]) -> Path:
    """Grava `data` em YAML ou JSON conforme a extensão de `path`."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() == ".json":
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    else:
        text = yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    path.write_text(text, encoding="utf-8")
    return path
