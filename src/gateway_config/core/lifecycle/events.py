# src/gateway_config/core/lifecycle/events.py
"""
Emissor de eventos do ciclo de vida.

Eventos canônicos:
    - `load`           → payload: o controlador, após sucesso do load inicial
    - `error`          → payload: a exceção do load inicial
    - `gateway-update` → payload: o novo subtree `gateway`, após reload

Handlers podem ser funções síncronas ou corrotinas; são chamados em
ordem de registro. Transições registradas via `record()` ficam no log
`events`, com timestamp UTC, para inspeção.
"""

from __future__ import annotations

import inspect
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

EVENT_LOAD = "load"
EVENT_ERROR = "error"
EVENT_GATEWAY_UPDATE = "gateway-update"

Handler = Callable[[Any], Any]


class EventEmitter:
    """Registro de handlers por nome de evento."""

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = {}
        self.events: List[Dict[str, Any]] = []

    def on(self, event: str, handler: Handler) -> Handler:
        self._handlers.setdefault(event, []).append(handler)
        return handler

    def off(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    def record(self, event: str, message: str, **extra: Any) -> None:
        entry = {
            "event": event,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        entry.update(extra)
        self.events.append(entry)

    async def emit(self, event: str, payload: Any) -> None:
        for handler in list(self._handlers.get(event, [])):
            result = handler(payload)
            if inspect.isawaitable(result):
                await result
