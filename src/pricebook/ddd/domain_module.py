"""
DomainModule: one object per bounded context.
Describes aggregate, repositories, bindings, commands and queries; exposes
commands and queries over HTTP.
"""
from __future__ import annotations

import dataclasses
import json
import re
import typing
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional, Type, Union

import structlog
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from pricebook.core.app import Application
from pricebook.core.container import Container
from pricebook.core.module import Module
from pricebook.ddd.commands import Command, Query
from pricebook.domain import AlreadyExists, NotFound, PricingError, Repository

logger = structlog.get_logger(__name__)

Handler = Union[Type[Any], Callable[..., Any]]
Presenter = Callable[[Any], Any]

_STATUS_BY_ERROR: list[tuple[type[PricingError], int]] = [
    (NotFound, 404),
    (AlreadyExists, 409),
    (PricingError, 400),
]


class BadRequest(Exception):
    """Payload could not be turned into a command or query."""


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def status_for(error: PricingError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def to_jsonable(value: Any) -> Any:
    """Dataclasses, enums, datetimes and decimals to plain JSON values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in value]
    return value


def _unwrap_optional(tp: Any) -> Any:
    if typing.get_origin(tp) is Union:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def _coerce(name: str, raw: Any, tp: Any) -> Any:
    """Query-string and JSON text values: convert them to scalar and datetime field types."""
    if not isinstance(raw, str):
        return raw
    optional = typing.get_origin(tp) is Union and type(None) in typing.get_args(tp)
    target = _unwrap_optional(tp)
    if raw == "" and optional:
        return None
    try:
        if target is bool:
            return raw.strip().lower() in ("1", "true", "yes", "on")
        if target is int:
            return int(raw)
        if target is float:
            return float(raw)
        if target is datetime:
            text = raw.strip()
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            return datetime.fromisoformat(text)
    except ValueError:
        raise BadRequest(f"Field {name!r} expects {target.__name__}, got {raw!r}") from None
    if typing.get_origin(target) is list or target is list:
        return [part for part in raw.split(",") if part]
    return raw


def build_payload(payload_type: type, body: Any) -> Any:
    """Instantiate a command/query dataclass from a JSON object or query params."""
    if not isinstance(body, dict):
        raise BadRequest("Body must be a JSON object")
    hints = typing.get_type_hints(payload_type)
    known = {f.name for f in dataclasses.fields(payload_type)}
    unknown = sorted(set(body) - known)
    if unknown:
        raise BadRequest(f"Unknown fields: {', '.join(unknown)}")
    kwargs = {key: _coerce(key, value, hints.get(key, Any)) for key, value in body.items()}
    try:
        return payload_type(**kwargs)
    except TypeError as exc:
        raise BadRequest(str(exc)) from None


async def _read_json(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        raise BadRequest("Body is not valid JSON") from None


def _error_response(error: PricingError) -> JSONResponse:
    return JSONResponse(error.to_dict(), status_code=status_for(error))


class DomainModule(Module):
    """
    One object = full bounded context.
    .aggregate() .repository() .bind() .command() .query()
    Register via app.register(module).

    A handler is a class (resolved from the container, dependencies injected),
    or a plain callable. With `method`, that method of the resolved instance is
    called instead of `__call__`.
    """

    def __init__(self, name: str, prefix: str | None = None) -> None:
        self.name = name
        self.prefix = prefix or f"/{name}"
        self._aggregate_roots: list[type] = []
        self._repositories: list[tuple[Type[Repository[Any]], Type[Any]]] = []
        self._bindings: list[tuple[Any, Type[Any]]] = []
        self._commands: list[tuple[Type[Command], Handler, Optional[str]]] = []
        self._queries: list[tuple[Type[Query], Handler, Optional[str], Optional[Presenter]]] = []

    def aggregate(self, root: type) -> DomainModule:
        """Register aggregate root type (metadata only)."""
        self._aggregate_roots.append(root)
        return self

    def repository(self, interface: Type[Repository[Any]], impl: Type[Any]) -> DomainModule:
        self._repositories.append((interface, impl))
        return self

    def bind(self, interface: Any, impl: Type[Any]) -> DomainModule:
        """Register any interface -> implementation for DI (ports, domain services)."""
        self._bindings.append((interface, impl))
        return self

    def command(self, cmd_type: Type[Command], handler: Handler, method: str | None = None) -> DomainModule:
        self._commands.append((cmd_type, handler, method))
        return self

    def query(
        self,
        query_type: Type[Query],
        handler: Handler,
        method: str | None = None,
        *,
        present: Presenter | None = None,
    ) -> DomainModule:
        self._queries.append((query_type, handler, method, present))
        return self

    def register_into(self, app: Application) -> None:
        container = app.container

        # Repositories and bindings: interface -> implementation, unless the
        # application already provides one (e.g. a preconfigured instance).
        for iface, impl in [*self._repositories, *self._bindings]:
            if container.has(iface):
                continue
            container.register_class(impl)
            container.register(iface, lambda c=container, i=impl: c.resolve(i))

        base = self.prefix.rstrip("/")
        for cmd_type, handler, method in self._commands:
            if isinstance(handler, type) and not container.has(handler):
                container.register_class(handler)
            self._add_route(app, base, cmd_type, self._make_command_endpoint(cmd_type, handler, method, container))

        for query_type, handler, method, present in self._queries:
            if isinstance(handler, type) and not container.has(handler):
                container.register_class(handler)
            self._add_route(
                app, base, query_type, self._make_query_endpoint(query_type, handler, method, present, container)
            )

    def _add_route(self, app: Application, base: str, payload_type: type, endpoint: Callable) -> None:
        name = _snake(payload_type.__name__)
        app.add_route(
            f"{base}/{payload_type.route_segment}/{name}",
            endpoint,
            methods=list(payload_type.http_methods),
            name=f"{self.name}.{name}",
        )

    def _target(self, handler: Handler, method: str | None, container: Container) -> Callable[..., Any]:
        if isinstance(handler, type):
            instance = container.resolve(handler)
            return getattr(instance, method) if method else instance
        return handler

    async def _dispatch(
        self, payload_type: type, body: Any, handler: Handler, method: str | None, container: Container
    ) -> Any:
        payload = build_payload(payload_type, body)
        result = self._target(handler, method, container)(payload)
        if hasattr(result, "__await__"):
            result = await result
        return result

    def _make_command_endpoint(
        self, cmd_type: Type[Command], handler: Handler, method: str | None, container: Container
    ) -> Callable:
        async def endpoint(request: Request) -> Response:
            try:
                body = await _read_json(request)
            except BadRequest as exc:
                return JSONResponse({"error": "BAD_REQUEST", "message": str(exc)}, status_code=400)
            try:
                result = await self._dispatch(cmd_type, body, handler, method, container)
            except BadRequest as exc:
                return JSONResponse({"error": "BAD_REQUEST", "message": str(exc)}, status_code=400)
            except PricingError as exc:
                logger.warning("command.rejected", command=cmd_type.__name__, error=exc.code, message=exc.message)
                return _error_response(exc)
            if result is None:
                return JSONResponse({"ok": True})
            return JSONResponse({"ok": True, "result": to_jsonable(result)})
        return endpoint

    def _make_query_endpoint(
        self,
        query_type: Type[Query],
        handler: Handler,
        method: str | None,
        present: Presenter | None,
        container: Container,
    ) -> Callable:
        async def endpoint(request: Request) -> Response:
            if request.method == "POST":
                try:
                    body = await _read_json(request)
                except BadRequest as exc:
                    return JSONResponse({"error": "BAD_REQUEST", "message": str(exc)}, status_code=400)
            else:
                body = dict(request.query_params)
            try:
                result = await self._dispatch(query_type, body, handler, method, container)
            except BadRequest as exc:
                return JSONResponse({"error": "BAD_REQUEST", "message": str(exc)}, status_code=400)
            except PricingError as exc:
                logger.warning("query.rejected", query=query_type.__name__, error=exc.code, message=exc.message)
                return _error_response(exc)
            if result is None:
                return JSONResponse(
                    {"error": NotFound.code, "message": f"{query_type.__name__}: nothing found"},
                    status_code=404,
                )
            if present is not None:
                result = present(result)
            return JSONResponse(to_jsonable(result))
        return endpoint
