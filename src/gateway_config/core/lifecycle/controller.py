# src/gateway_config/core/lifecycle/controller.py
"""
Lifecycle Controller — orquestração do pipeline de resolução.

O controlador executa, em ordem, os estágios locais (`resolve_local_config`)
e o Store Overlay, mantém o estado de carga e emite eventos.

Máquina de estados:
    UNLOADED → LOADING            no primeiro `load()`
    LOADING  → LOADED             em sucesso (loads seguintes são no-op)
    LOADING  → ERROR              em falha (um `load()` posterior pode tentar de novo)
    *        → LOADING            em `reload()`, sempre

Contratos de erro (assimetria intencional):
    - `load()` é fire-and-subscribe: falhas viram o evento `error` e o
      método não levanta exceção; chamadores do load inicial devem
      assinar os eventos ou inspecionar `state`
    - `reload()` é call-and-await: falhas são propagadas ao chamador e
      a configuração anterior permanece em vigor

Concorrência:
    - `load()` e `reload()` são serializados por um único `asyncio.Lock`
    - A nova configuração só substitui a anterior após ser totalmente
      calculada e validada (troca por uma única atribuição)
"""

from __future__ import annotations

import asyncio
import logging
from copy import deepcopy
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..config.arrays import normalize_arrays
from ..config.bootstrap import BootstrapProvider, ConsolePrompter, Prompter
from ..config.errors import ConfigError, ConfigNotLoadedError
from ..config.loader import resolve_config_base, resolve_local_config
from ..config.model import ServerConfig
from ..config.paths import resolve_tls_paths
from ..config.settings import LoaderSettings
from ..config.validation import GatewayValidator
from ..store.base import ConfigStore
from ..store.overlay import StoreOverlay
from .events import EVENT_ERROR, EVENT_GATEWAY_UPDATE, EVENT_LOAD, EventEmitter

logger = logging.getLogger(__name__)


class LoadState(str, Enum):
    """Estado de carga da configuração."""

    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class ConfigurationController(EventEmitter):
    """
    Dono exclusivo da `ServerConfig` em memória.

    A instância é criada explicitamente e repassada aos consumidores;
    a carga inicial começa em `initialize()`, nunca no construtor.

    Getters retornam cópias profundas e exigem que uma carga tenha sido
    concluída com sucesso ao menos uma vez (`ConfigNotLoadedError` caso
    contrário). Após um `reload()` com falha continuam servindo a última
    configuração válida.
    """

    def __init__(
        self,
        *,
        store: ConfigStore,
        settings: Optional[LoaderSettings] = None,
        prompter: Optional[Prompter] = None,
        gateway_validator: Optional[GatewayValidator] = None,
        environ: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
    ):
        super().__init__()
        self.settings = settings if settings is not None else LoaderSettings.from_env(environ)
        self.store = store
        self.prompter = prompter
        self.environ = environ
        self.config_base = resolve_config_base(self.settings.config_file, cwd)
        self._overlay = StoreOverlay(store, gateway_validator=gateway_validator)
        self._state = LoadState.UNLOADED
        self._config: Optional[ServerConfig] = None
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Estado
    # ------------------------------------------------------------------
    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def loaded(self) -> bool:
        return self._state is LoadState.LOADED

    def _set_state(self, state: LoadState, **extra: Any) -> None:
        self._state = state
        self.record("state", state.value, **extra)

    def _ensure_loaded(self) -> ServerConfig:
        if self._config is None:
            raise ConfigNotLoadedError(
                "Configuration not loaded. Only access configurations after the 'load' event is fired."
            )
        return self._config

    # ------------------------------------------------------------------
    # Getters (snapshots somente leitura)
    # ------------------------------------------------------------------
    @property
    def config(self) -> ServerConfig:
        return ServerConfig.from_dict(self._ensure_loaded().to_dict())

    @property
    def gateway(self) -> Dict[str, Any]:
        return deepcopy(self._ensure_loaded().gateway)

    @property
    def root_path(self) -> str:
        return self._ensure_loaded().root_path

    @property
    def middleware_path(self) -> str:
        return self._ensure_loaded().middleware_path

    @property
    def database(self) -> Dict[str, Any]:
        return deepcopy(self._ensure_loaded().database)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def _bootstrap(self) -> Dict[str, Any]:
        prompter = self.prompter if self.prompter is not None else ConsolePrompter()
        target = Path(self.config_base + ".yaml")
        return BootstrapProvider(prompter=prompter, target=target).create()

    async def _resolve(self) -> ServerConfig:
        local = resolve_local_config(
            self.config_base,
            environment=self.settings.environment,
            bootstrap=self._bootstrap,
            environ=self.environ,
        )
        server = local.server
        logger.debug("Local configuration resolved from %s", local.base)

        # reset apenas antes da primeira carga bem-sucedida
        reset = self.settings.reset_before_start and self._config is None
        server["gateway"] = await self._overlay.apply(server.get("gateway"), reset=reset)
        # o gateway persistido pode trazer escalares e caminhos relativos
        normalize_arrays(server)
        resolve_tls_paths(server)
        return ServerConfig.from_dict(server)

    async def initialize(self) -> LoadState:
        """Inicia a carga inicial e retorna o estado resultante."""
        await self.load()
        return self._state

    async def load(self) -> None:
        """
        Carga idempotente: executa o pipeline apenas se ainda não LOADED.

        Falhas são entregues pelo evento `error`; nada é levantado.
        """
        async with self._lock:
            if self._state is LoadState.LOADED:
                return
            self._set_state(LoadState.LOADING)
            try:
                config = await self._resolve()
            except ConfigError as exc:
                self._set_state(LoadState.ERROR, error=type(exc).__name__, detail=str(exc))
                logger.error("Configuration load failed: %s", exc, exc_info=exc)
                failure: Optional[ConfigError] = exc
            else:
                self._config = config
                self._set_state(LoadState.LOADED)
                logger.info("Configuration loaded from %s", self.config_base)
                failure = None

        if failure is not None:
            await self.emit(EVENT_ERROR, failure)
        else:
            await self.emit(EVENT_LOAD, self)

    async def reload(self) -> Dict[str, Any]:
        """
        Re-executa o pipeline completo, independente do estado atual.

        Returns:
            Dict[str, Any]: O novo subtree `gateway`.

        Raises:
            ConfigError: Qualquer falha do pipeline; a configuração
                anterior permanece em vigor.
        """
        async with self._lock:
            self._set_state(LoadState.LOADING, reload=True)
            try:
                config = await self._resolve()
            except ConfigError as exc:
                self._set_state(LoadState.ERROR, error=type(exc).__name__, detail=str(exc), reload=True)
                raise
            self._config = config
            self._set_state(LoadState.LOADED, reload=True)
            logger.info("Configuration reloaded from %s", self.config_base)
            gateway = deepcopy(config.gateway)

        await self.emit(EVENT_GATEWAY_UPDATE, gateway)
        return gateway
