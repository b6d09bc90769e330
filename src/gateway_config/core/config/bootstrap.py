# src/gateway_config/core/config/bootstrap.py
"""
Bootstrap Provider — criação da configuração na primeira execução.

Invocado apenas quando nenhum arquivo base (em nenhum dos três formatos)
e nenhum overlay de ambiente existem. O provider:

    1. carrega o template empacotado `server-default.yaml`
    2. coleta interativamente a topologia do store (standalone | cluster),
       host, porta, índice de database (opcional) e senha (opcional)
    3. monta `database.redis`
    4. grava o template resultante como novo arquivo base

Decisões arquiteturais:
    - A coleta é feita por um `Prompter` injetável (testável sem TTY)
    - Topologia cluster é sempre uma lista de endpoints, mesmo com um nó
    - O arquivo é gravado antes do retorno, para que loads futuros não
      passem por este estágio

Invariantes:
    - Falha de coleta ou de escrita → `BootstrapInputError`
"""

from __future__ import annotations

import getpass
import logging
import re
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

import yaml  # PyYAML

from .errors import BootstrapInputError
from .formats import dump_config_object

logger = logging.getLogger(__name__)

TEMPLATES_PACKAGE = "gateway_config.core.config.templates"
SERVER_TEMPLATE = "server-default.yaml"
GATEWAY_TEMPLATE = "gateway-default.yaml"

TOPOLOGIES = ("standalone", "cluster")
_DIGITS = re.compile(r"[0-9]+")


def load_template(name: str) -> Dict[str, Any]:
    """Carrega um template YAML empacotado como dict novo."""
    text = resources.files(TEMPLATES_PACKAGE).joinpath(name).read_text(encoding="utf-8")
    return yaml.safe_load(text) or {}


class Prompter(Protocol):
    """Fonte de respostas para o bootstrap interativo."""

    def ask(self, message: str, *, default: Optional[str] = None, secret: bool = False) -> str:
        ...


class ConsolePrompter:
    """Prompter de terminal baseado em `input`/`getpass`."""

    def ask(self, message: str, *, default: Optional[str] = None, secret: bool = False) -> str:
        suffix = f" [{default}]" if default else ""
        if secret:
            answer = getpass.getpass(f"{message}{suffix} ")
        else:
            answer = input(f"{message}{suffix} ")
        answer = answer.strip()
        return answer if answer else (default or "")


@dataclass(frozen=True)
class StoreAnswers:
    """Parâmetros de conexão coletados no bootstrap."""

    topology: str
    host: str
    port: int
    db: Optional[int] = None
    password: Optional[str] = None


def _parse_optional_int(raw: str, field: str) -> Optional[int]:
    if raw == "":
        return None
    if not _DIGITS.fullmatch(raw):
        raise BootstrapInputError(f"{field} deve ser numérico, recebido: {raw!r}")
    return int(raw)


def collect_store_answers(prompter: Prompter) -> StoreAnswers:
    """
    Coleta a topologia do store via `prompter`.

    Raises:
        BootstrapInputError: Se a coleta for cancelada ou uma resposta
            for inválida.
    """
    try:
        topology = prompter.ask("Choose the redis topology (standalone/cluster):", default="standalone")
        host = prompter.ask("Redis host:", default="127.0.0.1")
        port_raw = prompter.ask("Redis port:", default="6379")
        db_raw = prompter.ask("Redis DB number (Optional):")
        password = prompter.ask("Redis Password (Optional):", secret=True)
    except (EOFError, KeyboardInterrupt, OSError) as exc:
        raise BootstrapInputError("Coleta interativa dos parâmetros do store cancelada") from exc

    topology = topology.strip().lower()
    if topology not in TOPOLOGIES:
        raise BootstrapInputError(f"Topologia inválida: {topology!r} (esperado: {', '.join(TOPOLOGIES)})")

    port = _parse_optional_int(port_raw.strip(), "port")
    if port is None:
        port = 6379

    return StoreAnswers(
        topology=topology,
        host=host.strip(),
        port=port,
        db=_parse_optional_int(db_raw.strip(), "db"),
        password=password or None,
    )


def build_redis_config(answers: StoreAnswers) -> Dict[str, Any]:
    """Monta o bloco `database.redis` a partir das respostas."""
    endpoint = {"host": answers.host, "port": answers.port}
    if answers.topology == "standalone":
        redis: Dict[str, Any] = {"standalone": endpoint}
    else:
        redis = {"cluster": [endpoint]}

    options: Dict[str, Any] = {}
    if answers.db is not None:
        options["db"] = answers.db
    if answers.password:
        options["password"] = answers.password
    if options:
        redis["options"] = options
    return redis


class BootstrapProvider:
    """Gera, persiste e retorna uma configuração de servidor nova."""

    def __init__(self, *, prompter: Prompter, target: Union[str, Path]):
        self.prompter = prompter
        self.target = Path(target)

    def create(self) -> Dict[str, Any]:
        logger.info(
            "No server configuration file was found. Creating a configuration file and saving it on '%s'",
            self.target,
        )
        config = load_template(SERVER_TEMPLATE)
        answers = collect_store_answers(self.prompter)
        config.setdefault("database", {})["redis"] = build_redis_config(answers)

        try:
            dump_config_object(self.target, config)
        except OSError as exc:
            raise BootstrapInputError(f"Falha ao gravar configuração em {self.target}") from exc

        return config
