"""Snapshot a FastAPI/Starlette route table into `Route` records.

The snapshot is taken once per run; the generation logic never touches the
live application afterwards.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Iterable, List, Optional, Sequence

from fastapi.routing import APIRoute
from starlette.routing import Mount, Route as StarletteRoute

from uatdoc import rule_registry
from uatdoc.http.markers import marked_name
from uatdoc.logic.introspection import MiddlewareRegistry
from uatdoc.models.route import ACTION_SEPARATOR, ANONYMOUS_ACTION, Route


logger = logging.getLogger(__name__)

ROOT_URI = "/"
MAX_UNWRAP_DEPTH = 10


def _unwrap_app(app: Any) -> Any:
    """Peel ASGI wrappers until an object exposing `routes` is found."""
    current = app
    depth = 0
    while not hasattr(current, "routes") and hasattr(current, "app") and depth < MAX_UNWRAP_DEPTH:
        current = current.app
        depth += 1
    if not hasattr(current, "routes"):
        raise RuntimeError("Unable to find a route table on the given application")
    return current


def to_uri(path: str) -> str:
    stripped = path.lstrip("/")
    return stripped or ROOT_URI


def describe_endpoint(endpoint: Any) -> str:
    """`module.Class@method`, `module.function` or `Closure`."""
    if inspect.ismethod(endpoint):
        owner = endpoint.__self__
        cls = owner if inspect.isclass(owner) else type(owner)
        return f"{cls.__module__}.{cls.__qualname__}{ACTION_SEPARATOR}{endpoint.__name__}"
    if inspect.isfunction(endpoint):
        qualname = endpoint.__qualname__
        if "<lambda>" in qualname or "<locals>" in qualname:
            return ANONYMOUS_ACTION
        owner, _, method = qualname.rpartition(".")
        if owner:
            return f"{endpoint.__module__}.{owner}{ACTION_SEPARATOR}{method}"
        return f"{endpoint.__module__}.{qualname}"
    return ANONYMOUS_ACTION


class RouteSnapshot:
    def __init__(
        self,
        middleware_registry: Optional[MiddlewareRegistry] = None,
        middleware_groups: Iterable[str] = rule_registry.MIDDLEWARE_GROUPS,
    ) -> None:
        self.middleware_registry = middleware_registry or MiddlewareRegistry()
        self.middleware_groups = list(middleware_groups)

    def dependency_name(self, call: Any) -> Optional[str]:
        return marked_name(call) or self.middleware_registry.name_for(call)

    def middleware_for(self, route: StarletteRoute) -> List[Any]:
        tags = [str(t) for t in (getattr(route, "tags", None) or [])]
        entries: List[Any] = [g for g in self.middleware_groups if g in tags]
        if not isinstance(route, APIRoute):
            return entries
        declared = [d.dependency for d in route.dependencies if d.dependency is not None]
        for call in declared:
            entries.append(self.dependency_name(call) or call)
        # Endpoint parameter dependencies count only when they carry a name
        for sub in route.dependant.dependencies[len(declared):]:
            name = self.dependency_name(sub.call)
            if name and name not in entries:
                entries.append(name)
        return entries

    def snapshot(self, app: Any) -> List[Route]:
        routes = self._collect(_unwrap_app(app).routes, prefix="")
        logger.info("route_snapshot_taken count=%s", len(routes))
        return routes

    def _collect(self, routes: Sequence[Any], prefix: str) -> List[Route]:
        collected: List[Route] = []
        for route in routes:
            if isinstance(route, Mount):
                collected.extend(self._collect(route.routes or [], prefix + route.path))
            elif isinstance(route, StarletteRoute):
                collected.append(
                    Route(
                        uri=to_uri(prefix + route.path),
                        name=route.name,
                        action=describe_endpoint(route.endpoint),
                        http_methods=route.methods or {"GET"},
                        middleware=self.middleware_for(route),
                    )
                )
            else:
                logger.debug("route_skipped type=%s", type(route).__name__)
        return collected


def snapshot_routes(
    app: Any,
    middleware_registry: Optional[MiddlewareRegistry] = None,
    middleware_groups: Iterable[str] = rule_registry.MIDDLEWARE_GROUPS,
) -> List[Route]:
    return RouteSnapshot(middleware_registry, middleware_groups).snapshot(app)


__all__ = ["RouteSnapshot", "describe_endpoint", "snapshot_routes", "to_uri"]
