# src/gateway_config/core/config/errors.py
"""
Exceções canônicas da resolução de configuração do Gateway Config.

Este módulo define a hierarquia oficial de exceções levantadas durante
o carregamento, a mesclagem, a validação e a reconciliação com o store.

Taxonomia:
    - ConfigParseError       → conteúdo de arquivo malformado
    - ConfigValidationError  → violação estrutural (arquivo ou store)
    - MissingProtocolError   → `gateway.protocol` ausente após o merge
    - StoreError             → falha de leitura/escrita/conectividade no store
    - BootstrapInputError    → coleta interativa falhou ou foi cancelada
    - ConfigNotLoadedError   → acesso a getters fora do estado LOADED

Invariantes:
    - Todas as exceções herdam de `ConfigError`
    - Nenhuma exceção implica fallback ou recovery automático

Propagação:
    - `load()` converte estas exceções em evento `error`
    - `reload()` as propaga diretamente ao chamador
"""


class ConfigError(Exception):
    """
    Exceção base para erros de resolução de configuração.

    Permite captura genérica de qualquer falha do pipeline de
    configuração sem capturar erros de programação.
    """


class ConfigParseError(ConfigError):
    """
    Conteúdo de arquivo de configuração malformado.

    Decisões arquiteturais:
        - Falha fatal, sem fallback para outro formato
        - A raiz do documento deve ser um mapa chave-valor
    """


class ConfigValidationError(ConfigError):
    """Violação estrutural da configuração do servidor ou do gateway."""


class MissingProtocolError(ConfigValidationError):
    """
    `gateway.protocol` ausente após todas as mesclagens.

    Verificado explicitamente após o merge com o store, e não apenas
    pela validação estrutural: a configuração de protocolo não pode ser
    sintetizada.
    """


class StoreError(ConfigError):
    """Falha de conectividade, leitura ou escrita no ConfigStore."""


class BootstrapInputError(ConfigError):
    """Coleta interativa de parâmetros do store falhou ou foi cancelada."""


class ConfigNotLoadedError(ConfigError):
    """Acesso à configuração antes de o ciclo de vida atingir LOADED."""
