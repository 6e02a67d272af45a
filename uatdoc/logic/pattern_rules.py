"""Static middleware rule matching.

Pure lookup over the configured rule tables: exact middleware names first,
then wildcard patterns (`role:*`) in their declared order. No FastAPI or
reflection imports here.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Iterable, List, Mapping, Optional

from uatdoc.models.rule import Prerequisite, Rule


WILDCARD = "*"
CLOSURE_MIDDLEWARE = "closure_middleware"
OBJECT_MIDDLEWARE = "object_middleware"

logger = logging.getLogger(__name__)


def pattern_prefix(pattern: str) -> Optional[str]:
    """Return the literal prefix of `prefix*`, or None for unusable keys.

    A bare `*` has no prefix and would match every middleware name, group
    names included, so it is unusable too.
    """
    if not pattern.endswith(WILDCARD) or pattern.count(WILDCARD) != 1:
        return None
    return pattern[: -len(WILDCARD)] or None


def resolve(
    middleware_name: str,
    exact_rules: Mapping[str, Rule],
    pattern_rules: Mapping[str, Rule],
) -> Optional[Rule]:
    """Resolve a middleware name to a Rule.

    Exact keys return their Rule unchanged. Otherwise the first pattern, in
    declared order, whose prefix starts the name wins and has its
    `{placeholder}` tokens replaced by the remainder of the name. Overlapping
    prefixes (`auth:*` before a longer `auth:admin*`) resolve to whichever
    was declared first.
    """
    rule = exact_rules.get(middleware_name)
    if rule is not None:
        return rule
    for pattern, pattern_rule in pattern_rules.items():
        prefix = pattern_prefix(pattern)
        if prefix is None:
            continue
        if middleware_name.startswith(prefix):
            return pattern_rule.substitute(middleware_name[len(prefix):])
    return None


def classify_opaque_handler(handler: Any) -> Prerequisite:
    """Describe a middleware entry that has no name to match on."""
    if inspect.isfunction(handler) or inspect.ismethod(handler) or inspect.isbuiltin(handler):
        return Prerequisite(
            type=CLOSURE_MIDDLEWARE,
            description="Custom closure middleware",
            action="Ensure closure middleware requirements are met",
            validation="Manually verify closure middleware behavior",
        )
    cls = handler if inspect.isclass(handler) else type(handler)
    class_name = f"{cls.__module__}.{cls.__qualname__}"
    return Prerequisite(
        type=OBJECT_MIDDLEWARE,
        description=f"Object middleware: {class_name}",
        action=f"Ensure requirements for {class_name} are met",
        validation=f"Verify {class_name} middleware passes",
        middleware_class=class_name,
    )


def match_middleware_rules(
    middleware: Iterable[Any],
    exact_rules: Mapping[str, Rule],
    pattern_rules: Mapping[str, Rule],
) -> List[Prerequisite]:
    """Resolve each middleware entry against the static rule tables.

    Unmatched names are skipped and logged at DEBUG.
    """
    prerequisites: List[Prerequisite] = []
    for entry in middleware:
        if not isinstance(entry, str):
            prerequisites.append(classify_opaque_handler(entry))
            continue
        rule = resolve(entry, exact_rules, pattern_rules)
        if rule is None:
            logger.debug("unknown_middleware name=%s", entry)
            continue
        prerequisites.append(Prerequisite.from_rule(rule))
    return prerequisites


__all__ = [
    "CLOSURE_MIDDLEWARE",
    "OBJECT_MIDDLEWARE",
    "WILDCARD",
    "classify_opaque_handler",
    "match_middleware_rules",
    "pattern_prefix",
    "resolve",
]
