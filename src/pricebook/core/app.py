"""Application: composed from modules via app.register(module). Backed by Starlette."""
from __future__ import annotations

from typing import Any, Callable

import structlog
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from pricebook.core.container import Container
from pricebook.core.module import Module

logger = structlog.get_logger(__name__)


async def _health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


class Application:
    """
    ASGI application composed from modules via register(module).
    Routes are collected first; the Starlette app is built on first use.
    """

    def __init__(self, config: Any = None) -> None:
        self._modules: list[Module] = []
        self._container = Container()
        self._routes: list[Route] = [Route("/health", _health, methods=["GET"], name="health")]
        self._asgi: Starlette | None = None
        self.config = config
        if config is not None:
            self._container.register_instance(type(config), config)
            self._container.register_instance("config", config)

    def register(self, module: Module) -> Application:
        """Register a module (DomainModule, ...). Returns self for chaining."""
        if self._asgi is not None:
            raise RuntimeError("Cannot register modules after the application has started")
        if any(existing.name == module.name for existing in self._modules):
            raise RuntimeError(f"Module already registered: {module.name}")
        module.register_into(self)
        self._modules.append(module)
        logger.info("module.registered", module=module.name, routes=len(self._routes))
        return self

    def add_route(
        self,
        path: str,
        endpoint: Callable[..., Any],
        methods: list[str] | None = None,
        *,
        name: str | None = None,
    ) -> None:
        """Add an HTTP route. endpoint is an async callable taking a Starlette Request."""
        if self._asgi is not None:
            raise RuntimeError("Cannot add routes after the application has started")
        self._routes.append(Route(path, endpoint, methods=methods or ["GET"], name=name))

    @property
    def modules(self) -> list[Module]:
        return list(self._modules)

    @property
    def routes(self) -> list[Route]:
        return list(self._routes)

    @property
    def container(self) -> Container:
        """DI container: registration and resolution of dependencies."""
        return self._container

    def asgi(self) -> Starlette:
        if self._asgi is None:
            self._asgi = Starlette(routes=self._routes)
        return self._asgi

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.asgi()(scope, receive, send)

    def run(self, host: str = "127.0.0.1", port: int = 8000) -> None:
        """Run the HTTP server (blocks)."""
        import uvicorn

        logger.info("server.starting", host=host, port=port, routes=len(self._routes))
        uvicorn.run(self.asgi(), host=host, port=port, log_config=None)
