"""Name FastAPI dependencies for the route snapshot.

FastAPI has no named middleware per route; guards are dependencies. Tagging a
dependency callable with a middleware name (`auth`, `role:admin`) lets the
snapshot report it the way the rule tables expect.

    @uat_middleware("role:admin")
    def require_admin(user=Depends(current_user)): ...
"""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar


MARKER_ATTRIBUTE = "__uat_middleware__"

F = TypeVar("F", bound=Callable[..., Any])


def uat_middleware(name: str) -> Callable[[F], F]:
    if not name or not name.strip():
        raise ValueError("middleware name must be a non-empty string")

    def decorate(fn: F) -> F:
        setattr(fn, MARKER_ATTRIBUTE, name)
        return fn

    return decorate


def marked_name(dependency: Any) -> Optional[str]:
    name = getattr(dependency, MARKER_ATTRIBUTE, None)
    return name if isinstance(name, str) else None


__all__ = ["MARKER_ATTRIBUTE", "marked_name", "uat_middleware"]
