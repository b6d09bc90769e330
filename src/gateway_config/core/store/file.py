# src/gateway_config/core/store/file.py
"""
Store persistente em diretório local.

Layout determinístico (relativo ao diretório do store):
    - gateway.json    → configuração corrente do gateway
    - gateway.version → marcador de versão corrente

Escritas são atômicas (arquivo temporário + `replace`); um temporário
nunca sobrevive a uma escrita com falha. O I/O roda fora do event loop
(`asyncio.to_thread`).
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union


class FileConfigStore:
    """ConfigStore baseado em arquivos JSON."""

    GATEWAY_FILE = "gateway.json"
    VERSION_FILE = "gateway.version"

    def __init__(self, *, store_dir: Union[str, Path]):
        self.store_dir = Path(store_dir)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    def gateway_path(self) -> Path:
        return self.store_dir / self.GATEWAY_FILE

    def version_path(self) -> Path:
        return self.store_dir / self.VERSION_FILE

    # ------------------------------------------------------------------
    # I/O síncrono
    # ------------------------------------------------------------------
    def _write(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        try:
            tmp.write_text(text, encoding="utf-8")
            os.replace(tmp, path)
        finally:
            if tmp.exists():
                tmp.unlink()

    def _read(self, path: Path) -> Optional[str]:
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _remove_all(self) -> None:
        for path in (self.gateway_path(), self.version_path()):
            if path.exists():
                path.unlink()

    # ------------------------------------------------------------------
    # ConfigStore
    # ------------------------------------------------------------------
    async def get_gateway(self) -> Optional[Dict[str, Any]]:
        text = await asyncio.to_thread(self._read, self.gateway_path())
        if text is None:
            return None
        return json.loads(text)

    async def save_gateway(self, gateway: Dict[str, Any]) -> None:
        text = json.dumps(gateway, indent=2, sort_keys=True, ensure_ascii=False)
        await asyncio.to_thread(self._write, self.gateway_path(), text)

    async def register_gateway_version(self, version: str) -> None:
        await asyncio.to_thread(self._write, self.version_path(), version)

    async def get_gateway_version(self) -> Optional[str]:
        text = await asyncio.to_thread(self._read, self.version_path())
        return None if text is None else text.strip()

    async def flush(self) -> None:
        await asyncio.to_thread(self._remove_all)
