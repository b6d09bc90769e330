# tests/conftest.py
"""
Fixtures compartilhados para testes do Gateway Config.

Este módulo define fixtures reutilizáveis que fornecem:
- conteúdo YAML de configuração base e overlay semelhantes ao uso real
- um gateway mínimo e válido
- um Prompter roteirizado para o bootstrap (sem TTY)
- um helper para gravar arquivos de configuração em `tmp_path`

Decisões arquiteturais:
    - Conteúdos são fornecidos como string/dict para manter os testes explícitos
    - Imports do core são realizados de forma lazy dentro das fixtures
    - Nenhuma fixture lê o ambiente real do processo

Limites explícitos:
    - Não substituir testes de integração com um store real
    - Não conter lógica condicional complexa
"""

from pathlib import Path
from typing import Dict, List, Optional

import pytest


@pytest.fixture
def server_config_yaml() -> str:
    """
    YAML de configuração base semelhante ao `tree-gateway.yaml` real.

    Usado por:
        - Testes do loader e do overlay de ambiente
        - Testes do controlador de ciclo de vida
    """
    return """\
database:
  redis:
    standalone:
      host: localhost
      port: 6379
gateway:
  protocol:
    http:
      listenPort: 8000
  admin:
    protocol:
      http:
        listenPort: 8001
    userService:
      jwtSecret: local-secret
  logger:
    level: info
"""


@pytest.fixture
def server_config_overlay_yaml() -> str:
    """YAML de overlay de ambiente (ex.: `tree-gateway-production.yaml`)."""
    return """\
database:
  redis:
    standalone:
      host: redis.production
gateway:
  logger:
    level: error
"""


@pytest.fixture
def minimal_gateway() -> dict:
    """Gateway mínimo e válido (apenas protocolo HTTP)."""
    return {"protocol": {"http": {"listenPort": 8000}}}


@pytest.fixture
def write_config():
    """
    Fábrica que grava `<base><ext>` com o conteúdo informado.

    Returns:
        Callable[[Path, str, str], Path]: (base, content, ext) → caminho gravado.
    """

    def _write(base: Path, content: str, ext: str = ".yaml") -> Path:
        path = Path(str(base) + ext)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


class ScriptedPrompter:
    """Prompter que responde em ordem a partir de uma lista fixa."""

    def __init__(self, answers: List[str]):
        self.answers = list(answers)
        self.questions: List[str] = []

    def ask(self, message: str, *, default: Optional[str] = None, secret: bool = False) -> str:
        self.questions.append(message)
        if not self.answers:
            raise EOFError("no more scripted answers")
        answer = self.answers.pop(0)
        return answer if answer else (default or "")


@pytest.fixture
def scripted_prompter():
    """Fábrica de `ScriptedPrompter` (topologia, host, porta, db, senha)."""

    def _make(answers: List[str]) -> ScriptedPrompter:
        return ScriptedPrompter(answers)

    return _make


@pytest.fixture
def empty_environ() -> Dict[str, str]:
    """Ambiente vazio e isolado para interpolação e settings."""
    return {}
