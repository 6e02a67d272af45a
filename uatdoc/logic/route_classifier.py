"""Route selection and module grouping.

Selects the routes a human can exercise from a browser (GET, no path
parameters, web-facing, not excluded) and groups them into documentation
modules. Order of modules and of routes within a module follows the route
table.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from uatdoc.models.route import Route


DEFAULT_MODULE = "Dashboard"
PATH_PARAMETER_MARKER = "{"
API_URI_PREFIX = "api/"


def _upper_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def is_excluded(route: Route, excluded_prefixes: Sequence[str]) -> bool:
    return any(route.uri.startswith(prefix) for prefix in excluded_prefixes)


def is_web_route(route: Route) -> bool:
    """Web middleware wins; otherwise anything not marked or prefixed as API."""
    names = route.middleware_names()
    if "web" in names:
        return True
    return not route.uri.startswith(API_URI_PREFIX) and "api" not in names


def is_documentable(route: Route, excluded_prefixes: Sequence[str]) -> bool:
    return (
        "GET" in route.http_methods
        and not is_excluded(route, excluded_prefixes)
        and PATH_PARAMETER_MARKER not in route.uri
        and is_web_route(route)
    )


def select_routes(all_routes: Iterable[Route], excluded_prefixes: Sequence[str]) -> List[Route]:
    return [r for r in all_routes if is_documentable(r, excluded_prefixes)]


def module_name_for(route: Route) -> str:
    """Module from a dotted route name, else the first URI segment, else Dashboard."""
    if route.name and "." in route.name:
        head = route.name.split(".", 1)[0]
        if head:
            return _upper_first(head)
    first_segment = route.uri.strip("/").split("/", 1)[0]
    if first_segment:
        return _upper_first(first_segment)
    return DEFAULT_MODULE


def group_by_module(routes: Iterable[Route]) -> Dict[str, List[Route]]:
    """Group routes by module name; dict insertion order is first-seen order."""
    grouped: Dict[str, List[Route]] = {}
    for route in routes:
        grouped.setdefault(module_name_for(route), []).append(route)
    return grouped


__all__ = [
    "DEFAULT_MODULE",
    "group_by_module",
    "is_documentable",
    "is_excluded",
    "is_web_route",
    "module_name_for",
    "select_routes",
]
