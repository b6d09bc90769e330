# src/gateway_config/core/__init__.py
"""
Core do Gateway Config.

Este pacote reúne as responsabilidades essenciais para resolver a
configuração do gateway de forma previsível e rastreável.

Componentes principais:
    - config    → pipeline local de resolução (arquivo → ambiente → env vars
                  → paths → arrays) e validação estrutural
    - store     → capacidade de persistência do subtree dinâmico `gateway`
    - lifecycle → máquina de estados load/reload e notificação de eventos

Princípios fundamentais:
    - Cada estágio consome a saída do anterior e produz um novo valor
    - Apenas o Store Overlay realiza I/O remoto
    - Apenas o controlador de ciclo de vida mantém estado

Limites explícitos:
    - Não define schemas externos
    - Não depende de UI além do prompter injetável do bootstrap
"""
