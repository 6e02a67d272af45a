"""Reflective lookup of middleware handlers and policy classes.

Registries map the short names used in route tables to live Python objects
(or dotted import paths resolved lazily). The introspector reads docstrings
and source text from those objects. Everything read from source is a
heuristic: a permission check hidden behind a helper call will not be seen.
"""

from __future__ import annotations

import importlib
import inspect
import re
from dataclasses import dataclass, field, is_dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Protocol

from uatdoc.models.route import class_basename


# (pattern, template) pairs; matches are collected per pattern in this order
PERMISSION_PATTERNS = (
    (re.compile(r"""(?:hasPermissionTo|has_permission_to)\(\s*['"]([^'"]+)['"]\s*\)"""), "{}"),
    (re.compile(r"""\bcan\(\s*['"]([^'"]+)['"]\s*\)"""), "{}"),
    (re.compile(r"""(?:hasRole|has_role)\(\s*['"]([^'"]+)['"]\s*\)"""), "role:{}"),
)


def snake_case(name: str) -> str:
    s = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    s = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s)
    return s.replace("-", "_").lower()


def kebab_case(name: str) -> str:
    return snake_case(name).replace("_", "-")


def singular(word: str) -> str:
    """Very small English singulariser for policy name probing."""
    lower = word.lower()
    if lower.endswith("ies") and len(word) > 3:
        return word[:-3] + ("Y" if word[-3].isupper() else "y")
    if lower.endswith(("sses", "xes", "ches", "shes", "zes")):
        return word[:-2]
    if lower.endswith("s") and not lower.endswith(("ss", "us", "is")):
        return word[:-1]
    return word


def import_object(path: str) -> Any:
    """Import `package.module:attr` or `package.module.attr`."""
    module_name, sep, attr = path.partition(":")
    if not sep:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise ImportError(f"not an importable object path: {path!r}")
    obj: Any = importlib.import_module(module_name)
    for part in attr.split("."):
        obj = getattr(obj, part)
    return obj


def short_name(obj: Any) -> str:
    """Class/function short name of an object or of a dotted path string."""
    if isinstance(obj, str):
        return class_basename(obj)
    target = obj if (inspect.isclass(obj) or inspect.isroutine(obj)) else type(obj)
    return getattr(target, "__name__", type(obj).__name__)


def qualified_name(obj: Any) -> str:
    if isinstance(obj, str):
        return obj.replace(":", ".")
    target = obj if (inspect.isclass(obj) or inspect.isroutine(obj)) else type(obj)
    return f"{target.__module__}.{target.__qualname__}"


@dataclass(frozen=True)
class HandlerArtifact:
    """A middleware handler located through the registry."""

    name: str
    handler: Any

    def load(self) -> Any:
        """Return the live object, importing it when registered by path."""
        if isinstance(self.handler, str):
            return import_object(self.handler)
        return self.handler


class MiddlewareRegistry:
    """Short middleware name -> handler object or dotted path."""

    def __init__(self, handlers: Optional[Mapping[str, Any]] = None) -> None:
        self._handlers: Dict[str, Any] = dict(handlers or {})

    def locate(self, name: str) -> Optional[HandlerArtifact]:
        """Find a handler by exact key, then by the name forms of its short name."""
        if name in self._handlers:
            return HandlerArtifact(name=name, handler=self._handlers[name])
        lowered = name.lower()
        for handler in self._handlers.values():
            base = short_name(handler)
            if name in (snake_case(base), kebab_case(base)) or lowered == base.lower():
                return HandlerArtifact(name=name, handler=handler)
        return None

    def name_for(self, handler: Any) -> Optional[str]:
        """Reverse lookup used when snapshotting a live route table."""
        for name, candidate in self._handlers.items():
            if candidate is handler:
                return name
        return None


class PolicyRegistry:
    """Policies available by class name and by the subject type they guard."""

    def __init__(
        self,
        policies: Optional[Mapping[str, Any] | Iterable[Any]] = None,
        subjects: Optional[Mapping[Any, Any]] = None,
    ) -> None:
        if isinstance(policies, Mapping):
            self._policies: Dict[str, Any] = dict(policies)
        else:
            self._policies = {short_name(p): p for p in (policies or [])}
        self._subjects: Dict[Any, Any] = dict(subjects or {})

    def find(self, name: str) -> Optional[Any]:
        policy = self._policies.get(name)
        return self._load(policy) if policy is not None else None

    def for_controller(self, controller_name: str) -> Optional[Any]:
        """First policy whose subject type short name occurs in the controller name."""
        for subject, policy in self._subjects.items():
            if short_name(subject) in controller_name:
                return self._load(policy)
        return None

    @staticmethod
    def _load(policy: Any) -> Any:
        return import_object(policy) if isinstance(policy, str) else policy


@dataclass
class PolicyMethodDetails:
    method: str
    description: Optional[str]
    permissions: List[str] = field(default_factory=list)


class Introspector(Protocol):
    """Narrow reflection contract used by rule discovery.

    A static implementation (for example one backed by a hand-maintained
    table) can stand in for source scanning.
    """

    def summary(self, obj: Any) -> Optional[str]: ...

    def describe_policy_method(self, policy: Any, method: str) -> Optional[PolicyMethodDetails]: ...


class PythonIntrospector:
    """Docstring and source-text reader for live Python objects."""

    def summary(self, obj: Any) -> Optional[str]:
        """First non-empty line of the object's own docstring."""
        target = obj if (inspect.isclass(obj) or inspect.isroutine(obj)) else type(obj)
        doc = target.__dict__.get("__doc__") if inspect.isclass(target) else getattr(target, "__doc__", None)
        if not isinstance(doc, str):
            return None
        # @dataclass fills in a signature when the class has no docstring
        if is_dataclass(target) and doc.startswith(f"{target.__name__}("):
            return None
        for line in inspect.cleandoc(doc).splitlines():
            if line.strip():
                return line.strip()
        return None

    def policy_method(self, policy: Any, method: str) -> Optional[Callable[..., Any]]:
        """Return the policy's own callable for `method` or its snake_case form."""
        cls = policy if inspect.isclass(policy) else type(policy)
        for candidate in dict.fromkeys((method, snake_case(method))):
            attr = inspect.getattr_static(cls, candidate, None)
            if attr is None or candidate in vars(object):
                continue
            if isinstance(attr, (staticmethod, classmethod)):
                attr = attr.__func__
            if callable(attr):
                return attr
        return None

    def permissions(self, source: str) -> List[str]:
        found: List[str] = []
        for pattern, template in PERMISSION_PATTERNS:
            found.extend(template.format(m) for m in pattern.findall(source))
        return list(dict.fromkeys(found))

    def describe_policy_method(self, policy: Any, method: str) -> Optional[PolicyMethodDetails]:
        """Describe a policy method; None when the policy does not define it.

        Raises OSError/TypeError when source is unavailable (builtins,
        interactively defined classes); callers treat that as "unknown".
        """
        fn = self.policy_method(policy, method)
        if fn is None:
            return None
        source = inspect.getsource(fn)
        return PolicyMethodDetails(
            method=method,
            description=self.summary(fn),
            permissions=self.permissions(source),
        )


__all__ = [
    "HandlerArtifact",
    "Introspector",
    "MiddlewareRegistry",
    "PERMISSION_PATTERNS",
    "PolicyMethodDetails",
    "PolicyRegistry",
    "PythonIntrospector",
    "import_object",
    "kebab_case",
    "qualified_name",
    "short_name",
    "singular",
    "snake_case",
]
