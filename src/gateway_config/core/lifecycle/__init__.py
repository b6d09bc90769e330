"""
Ciclo de vida da configuração.

    - controller → máquina de estados UNLOADED/LOADING/LOADED/ERROR,
                   `load()` idempotente e `reload()` forçado
    - events     → emissor de eventos e log estruturado de transições
"""

from .controller import ConfigurationController, LoadState
from .events import EVENT_ERROR, EVENT_GATEWAY_UPDATE, EVENT_LOAD, EventEmitter

__all__ = [
    "ConfigurationController",
    "LoadState",
    "EventEmitter",
    "EVENT_LOAD",
    "EVENT_ERROR",
    "EVENT_GATEWAY_UPDATE",
]
