"""
Validação estrutural — configuração do servidor e do gateway.

Esta implementação evita dependências externas de schema para manter o
core leve; valida apenas o esqueleto consumido pelo pipeline de
resolução. Schemas completos de gateway/middleware são externos e podem
ser plugados via `extra` (qualquer callable que levante exceção).
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, Iterable, Optional

from .errors import ConfigValidationError, MissingProtocolError


GatewayValidator = Callable[[Dict[str, Any]], None]

_PROTOCOL_KINDS = ("http", "https")
_PORT_DIGITS = re.compile(r"[0-9]+")


def _is_non_empty_str(x: Any) -> bool:
    return isinstance(x, str) and bool(x.strip())


def _expect(cond: bool, msg: str) -> None:
    if not cond:
        raise ConfigValidationError(msg)


def _coerce_port(block: Dict[str, Any], key: str, where: str) -> None:
    """Valida a porta em `block[key]`; strings numéricas viram `int` in-place."""
    value = block[key]
    if isinstance(value, str) and _PORT_DIGITS.fullmatch(value.strip()):
        value = int(value.strip())
    _expect(
        isinstance(value, int) and not isinstance(value, bool) and 0 < value < 65536,
        f"{where} must be an integer port (1-65535)",
    )
    block[key] = value


def _validate_protocol(protocol: Any, where: str) -> None:
    _expect(isinstance(protocol, dict) and bool(protocol), f"{where} must be a non-empty mapping")
    _expect(
        any(kind in protocol for kind in _PROTOCOL_KINDS),
        f"{where} must declare http and/or https",
    )
    for kind in _PROTOCOL_KINDS:
        if kind not in protocol:
            continue
        block = protocol[kind]
        _expect(isinstance(block, dict), f"{where}.{kind} must be a mapping")
        for port_key in ("listenPort", "port"):
            if port_key in block:
                _coerce_port(block, port_key, f"{where}.{kind}.{port_key}")
    https = protocol.get("https")
    if isinstance(https, dict):
        _expect(_is_non_empty_str(https.get("privateKey")), f"{where}.https.privateKey is required")
        _expect(_is_non_empty_str(https.get("certificate")), f"{where}.https.certificate is required")


def validate_stats_config(stats: Any, where: str = "stats") -> None:
    """Valida um bloco de estatísticas (granularidade da série temporal)."""
    _expect(isinstance(stats, dict), f"{where} must be a mapping")
    granularity = stats.get("granularity")
    _expect(isinstance(granularity, dict), f"{where}.granularity is required")
    _expect(_is_non_empty_str(granularity.get("duration")), f"{where}.granularity.duration is required")
    _expect(_is_non_empty_str(granularity.get("ttl")), f"{where}.granularity.ttl is required")
    if "prefix" in stats:
        _expect(isinstance(stats["prefix"], str), f"{where}.prefix must be a string")
    if "requestMapper" in stats:
        _expect(isinstance(stats["requestMapper"], dict), f"{where}.requestMapper must be a mapping")


def _iter_stats_blocks(value: Any, where: str) -> Iterable[tuple]:
    if isinstance(value, dict):
        for key, child in value.items():
            path = f"{where}.{key}"
            if key == "stats":
                yield path, child
            else:
                yield from _iter_stats_blocks(child, path)
    elif isinstance(value, list):
        for i, child in enumerate(value):
            yield from _iter_stats_blocks(child, f"{where}[{i}]")


def validate_gateway_config(
    gateway: Any,
    *,
    extra: Optional[GatewayValidator] = None,
) -> Dict[str, Any]:
    """
    Valida o subtree `gateway` já reconciliado.

    Portas escritas como string numérica (ex.: `'{HTTP_PORT}'` após a
    interpolação) são convertidas para `int` no próprio `gateway`.

    Raises:
        MissingProtocolError: Se `protocol` estiver ausente ou vazio.
        ConfigValidationError: Para qualquer outra violação estrutural.
    """
    _expect(isinstance(gateway, dict), "gateway must be a mapping")
    if not gateway.get("protocol"):
        raise MissingProtocolError("GatewayConfig protocol is required.")
    _validate_protocol(gateway["protocol"], "gateway.protocol")

    admin = gateway.get("admin")
    if admin is not None:
        _expect(isinstance(admin, dict), "gateway.admin must be a mapping")
        if "protocol" in admin:
            _validate_protocol(admin["protocol"], "gateway.admin.protocol")
        user_service = admin.get("userService")
        if user_service is not None:
            _expect(isinstance(user_service, dict), "gateway.admin.userService must be a mapping")
            _expect(
                _is_non_empty_str(user_service.get("jwtSecret")),
                "gateway.admin.userService.jwtSecret is required",
            )

    for where, stats in _iter_stats_blocks(gateway, "gateway"):
        validate_stats_config(stats, where)

    if extra is not None:
        try:
            extra(gateway)
        except ConfigValidationError:
            raise
        except Exception as exc:
            raise ConfigValidationError(f"Gateway schema validation failed: {exc}") from exc

    return gateway


def validate_server_config(server: Any) -> Dict[str, Any]:
    """
    Valida o esqueleto da configuração do servidor.

    Executada antes do Path Defaulter: garante os tipos que os estágios
    seguintes percorrem. `rootPath`/`middlewarePath` vazios ou nulos são
    aceitos (recebem default).
    """
    _expect(isinstance(server, dict), "server config must be a mapping")
    for key in ("rootPath", "middlewarePath"):
        value = server.get(key)
        _expect(value is None or isinstance(value, str), f"{key} must be a string")

    database = server.get("database")
    if database is not None:
        _expect(isinstance(database, dict), "database must be a mapping")
        redis = database.get("redis")
        if redis is not None:
            _expect(isinstance(redis, dict), "database.redis must be a mapping")
            if "standalone" in redis:
                _expect(isinstance(redis["standalone"], dict), "database.redis.standalone must be a mapping")

    gateway = server.get("gateway")
    if gateway is not None:
        _expect(isinstance(gateway, dict), "gateway must be a mapping")
        protocol = gateway.get("protocol")
        if protocol is not None:
            _expect(isinstance(protocol, dict), "gateway.protocol must be a mapping")
            for kind in _PROTOCOL_KINDS:
                if protocol.get(kind) is not None:
                    _expect(isinstance(protocol[kind], dict), f"gateway.protocol.{kind} must be a mapping")

    return server
