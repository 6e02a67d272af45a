"""Route table snapshot records."""

from __future__ import annotations

import re
from typing import Any, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator


ACTION_SEPARATOR = "@"
ANONYMOUS_ACTION = "Closure"


def class_basename(qualified: str) -> str:
    """Return the last segment of a dotted (or backslash separated) name."""
    return re.split(r"[.\\:]", str(qualified or ""))[-1]


class Route(BaseModel):
    """Immutable view of one routed endpoint.

    `middleware` keeps the declared order and may mix plain names
    (`auth`, `role:admin`) with opaque handler objects.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    uri: str
    name: Optional[str] = None
    action: str = ANONYMOUS_ACTION
    http_methods: FrozenSet[str] = frozenset({"GET"})
    middleware: Tuple[Any, ...] = ()

    @field_validator("http_methods", mode="before")
    @classmethod
    def normalise_methods(cls, v: Any) -> FrozenSet[str]:
        if isinstance(v, str):
            v = [v]
        return frozenset(str(m).upper() for m in (v or ()))

    @field_validator("middleware", mode="before")
    @classmethod
    def middleware_as_tuple(cls, v: Any) -> Tuple[Any, ...]:
        if v is None:
            return ()
        if isinstance(v, (str, bytes)) or not hasattr(v, "__iter__"):
            return (v,)
        return tuple(v)

    def middleware_names(self) -> List[str]:
        """Return only the named middleware entries, in declared order."""
        return [m for m in self.middleware if isinstance(m, str)]

    def controller_method(self) -> Tuple[str, str] | None:
        """Split `controller@method`; None when the action has no single separator."""
        if self.action.count(ACTION_SEPARATOR) != 1:
            return None
        controller, method = self.action.split(ACTION_SEPARATOR)
        if not controller or not method:
            return None
        return controller, method


__all__ = ["ACTION_SEPARATOR", "ANONYMOUS_ACTION", "Route", "class_basename"]
