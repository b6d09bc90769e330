# tests/core/lifecycle/test_controller.py
"""
Testes do Lifecycle Controller.

Este módulo valida o ciclo de vida completo da configuração:
- `load()` idempotente, com falhas entregues pelo evento `error`
- `reload()` forçado, com falhas propagadas ao chamador
- bootstrap na primeira execução e ausência dele nas seguintes
- serialização de `load`/`reload` concorrentes

Decisões arquiteturais:
    - Cada teste usa seu próprio controlador e store em memória
    - Código assíncrono é dirigido por `asyncio.run`
    - Nenhum teste lê o ambiente real do processo (environ injetado)
"""

import asyncio
from pathlib import Path

import pytest

from gateway_config import ConfigurationController, LoadState, LoaderSettings
from gateway_config.core.config.errors import (
    ConfigNotLoadedError,
    ConfigParseError,
    ConfigValidationError,
    MissingProtocolError,
)
from gateway_config.core.lifecycle.events import EVENT_ERROR, EVENT_GATEWAY_UPDATE, EVENT_LOAD
from gateway_config.core.store.memory import InMemoryConfigStore


class FailingPrompter:
    def ask(self, message, *, default=None, secret=False):
        raise AssertionError(f"bootstrap should not run (asked: {message})")


def _controller(tmp_path: Path, store=None, config_file="./tree-gateway", **kwargs):
    return ConfigurationController(
        store=store if store is not None else InMemoryConfigStore(),
        settings=LoaderSettings(config_file=config_file, environment=kwargs.pop("environment", None)),
        prompter=kwargs.pop("prompter", FailingPrompter()),
        environ=kwargs.pop("environ", {}),
        cwd=str(tmp_path),
        **kwargs,
    )


def _collect(controller):
    seen = []
    controller.on(EVENT_LOAD, lambda payload: seen.append((EVENT_LOAD, payload)))
    controller.on(EVENT_ERROR, lambda payload: seen.append((EVENT_ERROR, payload)))
    controller.on(EVENT_GATEWAY_UPDATE, lambda payload: seen.append((EVENT_GATEWAY_UPDATE, payload)))
    return seen


def test_getters_before_load_raise(tmp_path: Path):
    controller = _controller(tmp_path)
    assert controller.state is LoadState.UNLOADED
    with pytest.raises(ConfigNotLoadedError):
        _ = controller.gateway


def test_load_success_emits_load_and_is_idempotent(tmp_path: Path, write_config, server_config_yaml):
    write_config(tmp_path / "tree-gateway", server_config_yaml)
    store = InMemoryConfigStore()
    controller = _controller(tmp_path, store)
    seen = _collect(controller)

    async def scenario():
        await controller.initialize()
        await controller.load()

    asyncio.run(scenario())

    assert controller.state is LoadState.LOADED
    assert seen == [(EVENT_LOAD, controller)]
    assert controller.root_path == str(tmp_path)
    assert controller.middleware_path == str(tmp_path / "middleware")
    assert controller.gateway["admin"]["userService"]["jwtSecret"] == "local-secret"
    assert controller.database["redis"]["standalone"]["host"] == "localhost"
    # gateway local aceito sem escrita no store
    assert asyncio.run(store.get_gateway()) is None
    assert [e["message"] for e in controller.events] == ["loading", "loaded"]


def test_load_failure_emits_error_and_can_retry(tmp_path: Path, write_config, server_config_yaml):
    base = tmp_path / "tree-gateway"
    write_config(base, "gateway: [broken\n")
    controller = _controller(tmp_path)
    seen = _collect(controller)

    asyncio.run(controller.load())

    assert controller.state is LoadState.ERROR
    assert len(seen) == 1
    assert seen[0][0] == EVENT_ERROR
    assert isinstance(seen[0][1], ConfigParseError)

    write_config(base, server_config_yaml)
    asyncio.run(controller.load())

    assert controller.state is LoadState.LOADED
    assert seen[-1] == (EVENT_LOAD, controller)


def test_async_handlers_are_awaited(tmp_path: Path, write_config, server_config_yaml):
    write_config(tmp_path / "tree-gateway", server_config_yaml)
    controller = _controller(tmp_path)
    seen = []

    async def on_load(payload):
        await asyncio.sleep(0)
        seen.append(payload.state)

    controller.on(EVENT_LOAD, on_load)
    asyncio.run(controller.load())

    assert seen == [LoadState.LOADED]


def test_scenario_a_bootstrap_once(tmp_path: Path, scripted_prompter):
    """
    Sem arquivo em `./app-config`, o bootstrap grava `app-config.yaml`;
    um novo load com o mesmo caminho não repete o bootstrap.
    """
    prompter = scripted_prompter(["standalone", "10.1.1.1", "6380", "", ""])
    store = InMemoryConfigStore()
    first = _controller(tmp_path, store, config_file="./app-config", prompter=prompter)

    asyncio.run(first.load())

    assert first.state is LoadState.LOADED
    assert (tmp_path / "app-config.yaml").exists()
    assert first.database["redis"]["standalone"] == {"host": "10.1.1.1", "port": 6380}
    assert len(prompter.questions) == 5

    asyncio.run(first.load())
    assert len(prompter.questions) == 5

    second = _controller(tmp_path, store, config_file="./app-config")
    asyncio.run(second.load())
    assert second.state is LoadState.LOADED
    assert second.database == first.database


def test_scenario_b_default_gateway_synthesized(tmp_path: Path, write_config):
    write_config(tmp_path / "tree-gateway", "database:\n  redis:\n    standalone:\n      host: h\n      port: 1\n")
    store = InMemoryConfigStore()
    controller = _controller(tmp_path, store)

    asyncio.run(controller.load())

    gateway = controller.gateway
    assert gateway["protocol"]["http"]["listenPort"] == 8000
    assert asyncio.run(store.get_gateway()) == gateway
    assert len(store.versions) == 1


def test_scenario_c_and_d_normalization(tmp_path: Path, write_config):
    write_config(
        tmp_path / "tree-gateway",
        "database:\n"
        "  redis:\n"
        "    cluster:\n"
        "      host: 10.0.0.1\n"
        "      port: 7000\n"
        "gateway:\n"
        "  protocol:\n"
        "    http:\n"
        "      listenPort: 8000\n"
        "  admin:\n"
        "    filter: a\n",
    )
    controller = _controller(tmp_path)

    asyncio.run(controller.load())

    assert controller.gateway["admin"]["filter"] == ["a"]
    assert controller.database["redis"]["cluster"] == [{"host": "10.0.0.1", "port": 7000}]


def test_stored_scalars_are_normalized_and_tls_resolved(tmp_path: Path, write_config, server_config_yaml):
    write_config(tmp_path / "tree-gateway", server_config_yaml)
    store = InMemoryConfigStore(
        {
            "filter": "stored-filter",
            "protocol": {"https": {"listenPort": 443, "privateKey": "./key.pem", "certificate": "./cert.pem"}},
        }
    )
    controller = _controller(tmp_path, store)

    asyncio.run(controller.load())

    gateway = controller.gateway
    assert gateway["filter"] == ["stored-filter"]
    assert gateway["protocol"]["https"]["privateKey"] == str(tmp_path / "key.pem")
    assert gateway["protocol"]["http"]["listenPort"] == 8000


def test_environment_overlay_and_interpolation(tmp_path: Path, write_config, server_config_yaml):
    write_config(tmp_path / "tree-gateway", server_config_yaml)
    write_config(tmp_path / "tree-gateway-production", "database:\n  redis:\n    standalone:\n      host: '{REDIS_HOST}'\n")
    controller = _controller(tmp_path, environment="production", environ={"REDIS_HOST": "redis.prod"})

    asyncio.run(controller.load())

    assert controller.database["redis"]["standalone"] == {"host": "redis.prod", "port": 6379}


def test_reload_emits_gateway_update(tmp_path: Path, write_config, server_config_yaml):
    write_config(tmp_path / "tree-gateway", server_config_yaml)
    store = InMemoryConfigStore()
    controller = _controller(tmp_path, store)
    seen = _collect(controller)

    async def scenario():
        await controller.load()
        await store.save_gateway({"logger": {"level": "debug"}})
        return await controller.reload()

    gateway = asyncio.run(scenario())

    assert gateway["logger"]["level"] == "debug"
    assert controller.gateway == gateway
    assert seen[-1] == (EVENT_GATEWAY_UPDATE, gateway)
    assert controller.state is LoadState.LOADED


def test_reload_failure_raises_and_keeps_previous_config(tmp_path: Path, write_config, minimal_gateway):
    write_config(tmp_path / "tree-gateway", "database: {}\n")
    store = InMemoryConfigStore(minimal_gateway)
    controller = _controller(tmp_path, store)
    seen = _collect(controller)

    async def scenario():
        await controller.load()
        await store.save_gateway({"logger": {"level": "debug"}})
        await controller.reload()

    with pytest.raises(MissingProtocolError):
        asyncio.run(scenario())

    assert controller.state is LoadState.ERROR
    assert controller.gateway == minimal_gateway
    assert [name for name, _ in seen] == [EVENT_LOAD]


class GatedStore(InMemoryConfigStore):
    """Store cujas leituras ficam pendentes até o gate abrir."""

    def __init__(self, gateway):
        super().__init__(gateway)
        self.gate = asyncio.Event()
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_gateway(self):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await self.gate.wait()
            return await super().get_gateway()
        finally:
            self.in_flight -= 1


def test_scenario_e_concurrent_reloads_are_serialized(tmp_path: Path, write_config, server_config_yaml):
    """
    Dois `reload()` concorrentes não se intercalam; um leitor concorrente
    só observa a configuração anterior completa ou a nova completa.
    """
    write_config(tmp_path / "tree-gateway", server_config_yaml)

    async def scenario():
        store = GatedStore({"logger": {"level": "v1"}})
        controller = _controller(tmp_path, store)
        store.gate.set()
        await controller.load()
        assert controller.gateway["logger"]["level"] == "v1"

        store.gate.clear()
        await store.save_gateway({"logger": {"level": "v2"}})
        first = asyncio.ensure_future(controller.reload())
        second = asyncio.ensure_future(controller.reload())

        observed = []
        for _ in range(5):
            await asyncio.sleep(0)
            observed.append(controller.gateway)

        store.gate.set()
        results = await asyncio.gather(first, second)
        return controller, store, observed, results

    controller, store, observed, results = asyncio.run(scenario())

    assert store.max_in_flight == 1
    for snapshot in observed:
        assert snapshot["logger"]["level"] == "v1"
        assert snapshot["protocol"]["http"]["listenPort"] == 8000
    assert [r["logger"]["level"] for r in results] == ["v2", "v2"]
    assert controller.gateway["logger"]["level"] == "v2"


def test_load_during_reload_waits_and_is_noop(tmp_path: Path, write_config, server_config_yaml):
    write_config(tmp_path / "tree-gateway", server_config_yaml)

    async def scenario():
        store = GatedStore(None)
        controller = _controller(tmp_path, store)
        seen = _collect(controller)
        reload_task = asyncio.ensure_future(controller.reload())
        load_task = asyncio.ensure_future(controller.load())
        await asyncio.sleep(0)
        store.gate.set()
        await asyncio.gather(reload_task, load_task)
        return controller, store, seen

    controller, store, seen = asyncio.run(scenario())

    assert controller.state is LoadState.LOADED
    assert store.max_in_flight == 1
    assert [name for name, _ in seen] == [EVENT_GATEWAY_UPDATE]


class FlushCountingStore(InMemoryConfigStore):
    def __init__(self, gateway=None):
        super().__init__(gateway)
        self.flushes = 0

    async def flush(self):
        self.flushes += 1
        await super().flush()


def test_reset_before_start_flushes_only_first_load(tmp_path: Path, write_config, server_config_yaml):
    write_config(tmp_path / "tree-gateway", server_config_yaml)
    store = FlushCountingStore({"logger": {"level": "stale"}})
    controller = ConfigurationController(
        store=store,
        settings=LoaderSettings(config_file="./tree-gateway", reset_before_start=True),
        prompter=FailingPrompter(),
        environ={},
        cwd=str(tmp_path),
    )

    async def scenario():
        await controller.load()
        first = controller.gateway
        await store.save_gateway({"logger": {"level": "debug"}})
        second = await controller.reload()
        return first, second

    first, second = asyncio.run(scenario())

    assert store.flushes == 1
    assert first["logger"]["level"] == "info"
    assert second["logger"]["level"] == "debug"


@pytest.mark.parametrize(
    "content",
    [
        "gateway: broken\n",
        "rootPath: 123\n",
        "middlewarePath: [a, b]\n",
        "gateway:\n  protocol: http\n",
    ],
)
def test_load_wrong_types_report_error_event(tmp_path: Path, write_config, content):
    write_config(tmp_path / "tree-gateway", content)
    controller = _controller(tmp_path)
    seen = _collect(controller)

    asyncio.run(controller.load())

    assert controller.state is LoadState.ERROR
    assert [name for name, _ in seen] == [EVENT_ERROR]
    assert isinstance(seen[0][1], ConfigValidationError)


def test_interpolated_port_is_accepted_as_int(tmp_path: Path, write_config):
    write_config(
        tmp_path / "tree-gateway",
        "gateway:\n"
        "  protocol:\n"
        "    http:\n"
        "      listenPort: '{HTTP_PORT}'\n",
    )
    controller = _controller(tmp_path, environ={"HTTP_PORT": "8080"})

    asyncio.run(controller.load())

    assert controller.state is LoadState.LOADED
    assert controller.gateway["protocol"]["http"]["listenPort"] == 8080


def test_config_getter_returns_detached_copy(tmp_path: Path, write_config, server_config_yaml):
    write_config(tmp_path / "tree-gateway", server_config_yaml)
    controller = _controller(tmp_path)
    asyncio.run(controller.load())

    snapshot = controller.config
    snapshot.gateway["protocol"] = None
    snapshot.database["redis"].clear()
    controller.gateway["logger"]["level"] = "debug"

    assert controller.gateway["protocol"]["http"]["listenPort"] == 8000
    assert controller.gateway["logger"]["level"] == "info"
    assert controller.config.database["redis"]["standalone"]["host"] == "localhost"
