# tests/test_smoke.py
"""
Testes de sanidade estrutural (smoke tests) do Gateway Config.

Este módulo contém testes mínimos cujo único objetivo é garantir que:
- o pacote `gateway_config` é importável
- os templates empacotados estão presentes
- o ambiente de testes (pytest) está funcional

Invariantes:
    - Estes testes devem sempre passar em um setup correto
    - Não dependem de store, filesystem do usuário ou variáveis de ambiente

Limites explícitos:
    - Não testar lógica de negócio
    - Não evoluir para testes unitários ou de integração
"""


def test_smoke():
    """Importa a API pública e confirma que os templates acompanham o pacote."""
    import gateway_config
    from gateway_config.core.config.bootstrap import GATEWAY_TEMPLATE, SERVER_TEMPLATE, load_template

    assert set(gateway_config.__all__) >= {"ConfigurationController", "LoadState", "LoaderSettings", "ServerConfig"}
    assert load_template(SERVER_TEMPLATE)
    assert load_template(GATEWAY_TEMPLATE)
