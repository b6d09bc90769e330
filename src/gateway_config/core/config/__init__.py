# src/gateway_config/core/config/__init__.py

"""
Camada de configuração do Gateway Config.

Este pacote contém os estágios locais do pipeline de resolução:

    Format Loader → Environment Overlay → Variable Interpolator
    → validação estrutural → Path Defaulter → Array Normalizer

além do Bootstrap Provider (primeira execução).

Princípios fundamentais:
    - Estágios são funções puras sobre dicionários (exceto bootstrap)
    - Erros estruturais são fatais e tipados (ver `errors`)
    - Nenhum estágio rebaixa silenciosamente um erro para um default

Invariantes:
    - A configuração resolvida é um dicionário puro (dict)
    - Após os estágios locais, `rootPath` e `middlewarePath` são absolutos

Limites explícitos:
    - Não acessa o store (responsabilidade de `core.store.overlay`)
    - Não mantém estado de ciclo de vida
"""
