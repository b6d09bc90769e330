"""
Store do Gateway Config.

Define a capacidade de persistência do subtree dinâmico `gateway`
(`ConfigStore`) e suas implementações concretas, selecionadas na
inicialização do processo:

    - InMemoryConfigStore → processo único / testes
    - FileConfigStore     → diretório local com JSON

O Store Overlay (`overlay`) é o único estágio do pipeline que conversa
com o store.
"""

from .base import ConfigStore
from .file import FileConfigStore
from .memory import InMemoryConfigStore
from .overlay import StoreOverlay

__all__ = ["ConfigStore", "FileConfigStore", "InMemoryConfigStore", "StoreOverlay"]
