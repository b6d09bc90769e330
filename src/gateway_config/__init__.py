"""
Gateway Config — resolução em camadas da configuração do gateway.

Este pacote raiz define o namespace público do Gateway Config, o motor
responsável por transformar arquivos de configuração, overlays de ambiente,
variáveis de ambiente e overrides persistidos em um único objeto de
configuração validado, com ciclo de vida load/reload observável.

Arquitetura em alto nível:
    - core.config    → formatos, overlay de ambiente, interpolação, paths,
                       normalização de arrays, bootstrap, validação
    - core.store     → interface `ConfigStore` e implementações concretas
    - core.lifecycle → controlador de ciclo de vida e eventos

Limites explícitos:
    - Não define schemas completos de gateway/middleware
    - Não implementa engine de persistência nem transporte de rede
    - Não consome a configuração (roteamento, admin API, middleware)

Este módulo existe para estabelecer o namespace e o ponto de entrada
lógico do Gateway Config.
"""

from .core.config.model import ServerConfig
from .core.config.settings import LoaderSettings
from .core.lifecycle.controller import ConfigurationController, LoadState

__all__ = ["ConfigurationController", "LoadState", "LoaderSettings", "ServerConfig"]
