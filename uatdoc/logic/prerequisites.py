"""Per-route prerequisite resolution with a static fallback.

Discovery (live middleware/policy inspection) is tried first. When no
discoverer is configured, when it raises, or when it finds nothing, the
configured rule tables and the static policy table are used instead. The two
sources are never merged for one route.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Protocol, Sequence

from uatdoc.config import PolicyMapping, UatConfig
from uatdoc.logic.pattern_rules import match_middleware_rules
from uatdoc.models.route import Route, class_basename
from uatdoc.models.rule import POLICY_AUTHORIZATION, Prerequisite, Rule


logger = logging.getLogger(__name__)


class RuleDiscoverer(Protocol):
    def discover_middleware_rules(self, middleware: Sequence[Any]) -> List[Prerequisite]: ...

    def discover_policy_rules(self, route: Route) -> List[Prerequisite]: ...


class PrerequisiteResolver:
    def __init__(
        self,
        exact_rules: Mapping[str, Rule],
        pattern_rules: Mapping[str, Rule],
        policy_mappings: Optional[Mapping[str, PolicyMapping]] = None,
        method_mapping: Optional[Mapping[str, str]] = None,
        discoverer: Optional[RuleDiscoverer] = None,
    ) -> None:
        self.exact_rules = exact_rules
        self.pattern_rules = pattern_rules
        self.policy_mappings = dict(policy_mappings or {})
        self.method_mapping = dict(method_mapping or {})
        self.discoverer = discoverer

    @classmethod
    def from_config(cls, config: UatConfig, discoverer: Optional[RuleDiscoverer] = None) -> "PrerequisiteResolver":
        return cls(
            exact_rules=config.rules.middleware,
            pattern_rules=config.rules.pattern,
            policy_mappings=config.policy_mappings,
            method_mapping=config.method_mapping,
            discoverer=discoverer,
        )

    def resolve_prerequisites(self, route: Route, middleware: Optional[Sequence[Any]] = None) -> List[Prerequisite]:
        """Return the prerequisites for one route; never None, never raises."""
        middleware = list(route.middleware if middleware is None else middleware)
        discovered = self._discover(route, middleware)
        if discovered:
            return discovered
        return self.middleware_prerequisites(middleware) + self.policy_prerequisites(route)

    def _discover(self, route: Route, middleware: List[Any]) -> List[Prerequisite]:
        if self.discoverer is None:
            return []
        try:
            found = list(self.discoverer.discover_middleware_rules(middleware))
            found.extend(self.discoverer.discover_policy_rules(route))
        except Exception as e:
            logger.warning("rule_discovery_failed uri=%s error=%s; using configured rules", route.uri, e)
            return []
        return found

    def middleware_prerequisites(self, middleware: Sequence[Any]) -> List[Prerequisite]:
        return match_middleware_rules(middleware, self.exact_rules, self.pattern_rules)

    def policy_method_for(self, controller_method: str) -> str:
        return self.method_mapping.get(controller_method, controller_method)

    def policy_prerequisites(self, route: Route) -> List[Prerequisite]:
        """Look the route's controller up in the static policy table."""
        parsed = route.controller_method()
        if parsed is None:
            return []
        controller, method = parsed
        mapping = self.policy_mappings.get(class_basename(controller))
        if mapping is None:
            return []
        policy_method = self.policy_method_for(method)
        info = mapping.methods.get(policy_method) or mapping.methods.get(method)
        if info is None:
            return []
        return [
            Prerequisite(
                type=POLICY_AUTHORIZATION,
                description=info.description,
                action=info.action,
                validation=info.validation,
                policy=mapping.policy,
                method=policy_method,
                permissions_required=list(info.permissions),
            )
        ]


__all__ = ["PrerequisiteResolver", "RuleDiscoverer"]
