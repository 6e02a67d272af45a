"""Dynamic rule discovery from live middleware and policy objects.

Primary source of prerequisites when registries are supplied. Middleware
names are classified against a fixed set of well-known guards first; only
custom names reach the middleware registry. Policy rules are inferred by
naming convention from the route's `Controller@method` action.

Nothing here raises past the public methods for a single unknown or
uninspectable artifact: the worst case is an `unknown_middleware` entry or no
policy prerequisite.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from uatdoc import rule_registry
from uatdoc.logic.introspection import (
    Introspector,
    MiddlewareRegistry,
    PolicyRegistry,
    PythonIntrospector,
    qualified_name,
    short_name,
    singular,
)
from uatdoc.logic.pattern_rules import classify_opaque_handler
from uatdoc.models.route import Route, class_basename
from uatdoc.models.rule import POLICY_AUTHORIZATION, Prerequisite, Rule


logger = logging.getLogger(__name__)

CONTROLLER_SUFFIX = "Controller"
POLICY_SUFFIX = "Policy"

BUILT_IN_RULES: Dict[str, Rule] = {
    "auth": Rule(
        type="authentication",
        description="User must be authenticated",
        action="Login with valid credentials",
        validation="Verify user session exists",
    ),
    "guest": Rule(
        type="unauthenticated",
        description="User must not be authenticated",
        action="Ensure no active user session",
        validation="Verify no user session exists",
    ),
    "verified": Rule(
        type="email_verification",
        description="User email must be verified",
        action="Ensure user email is verified",
        validation="Check the user's email verification timestamp is set",
    ),
    "can": Rule(
        type="gate_authorization",
        description="User must pass '{placeholder}' gate check",
        action="Login with user authorized for '{placeholder}'",
        validation="Verify gate check passes for '{placeholder}'",
    ),
}

# Recognised but without a dedicated template
OTHER_BUILT_INS = ("signed", "password.confirm", "throttle")

PARAMETERIZED_RULES: Dict[str, Rule] = {
    "role": Rule(
        type="role_authorization",
        description="User must have '{placeholder}' role",
        action="Login with user assigned to '{placeholder}' role",
        validation="Verify user has '{placeholder}' role",
    ),
    "permission": Rule(
        type="permission_authorization",
        description="User must have '{placeholder}' permission",
        action="Login with user having '{placeholder}' permission",
        validation="Verify user has '{placeholder}' permission",
    ),
    "throttle": Rule(
        type="rate_limiting",
        description="Request rate limiting applies ('{placeholder}')",
        action="Ensure requests do not exceed rate limits",
        validation="Verify rate limiting behavior",
    ),
}


def unknown_builtin_rule(name: str) -> Prerequisite:
    return Prerequisite(
        type="unknown_builtin",
        description=f"Built-in middleware: {name}",
        action=f"Ensure requirements for {name} are met",
        validation=f"Verify {name} middleware passes",
    )


def unknown_middleware_rule(name: str) -> Prerequisite:
    return Prerequisite(
        type="unknown_middleware",
        description=f"Unknown middleware: {name}",
        action=f"Investigate requirements for {name}",
        validation=f"Manually verify {name} behavior",
    )


class RuleDiscovery:
    """Infer prerequisites from live middleware handlers and policies."""

    def __init__(
        self,
        middleware_registry: Optional[MiddlewareRegistry] = None,
        policy_registry: Optional[PolicyRegistry] = None,
        method_mapping: Optional[Mapping[str, str]] = None,
        introspector: Optional[Introspector] = None,
        middleware_groups: Iterable[str] = rule_registry.MIDDLEWARE_GROUPS,
    ) -> None:
        self.middleware_registry = middleware_registry or MiddlewareRegistry()
        self.policy_registry = policy_registry or PolicyRegistry()
        self.method_mapping: Dict[str, str] = dict(
            rule_registry.METHOD_MAPPING if method_mapping is None else method_mapping
        )
        self.introspector: Introspector = introspector or PythonIntrospector()
        self.middleware_groups = frozenset(middleware_groups)

    # -- middleware ---------------------------------------------------------

    def discover_middleware_rules(self, middleware: Iterable[Any]) -> List[Prerequisite]:
        found = (self.analyze_middleware(entry) for entry in middleware)
        return [p for p in found if p is not None]

    def analyze_middleware(self, entry: Any) -> Optional[Prerequisite]:
        """Classify one middleware entry; None for groups that impose nothing."""
        if not isinstance(entry, str):
            return classify_opaque_handler(entry)
        if entry in self.middleware_groups:
            return None
        base, sep, param = entry.partition(":")
        if base == "auth":
            return Prerequisite.from_rule(BUILT_IN_RULES["auth"])
        if base in BUILT_IN_RULES:
            return Prerequisite.from_rule(BUILT_IN_RULES[base].substitute(param))
        if sep and base in PARAMETERIZED_RULES:
            return Prerequisite.from_rule(PARAMETERIZED_RULES[base].substitute(param))
        if base in OTHER_BUILT_INS:
            return unknown_builtin_rule(entry)
        return self._custom_middleware_rule(entry)

    def _custom_middleware_rule(self, name: str) -> Prerequisite:
        artifact = self.middleware_registry.locate(name)
        if artifact is None:
            logger.debug("middleware_handler_not_found name=%s", name)
            return unknown_middleware_rule(name)
        try:
            handler = artifact.load()
            description = self.introspector.summary(handler)
        except Exception:
            logger.warning("middleware_inspection_failed name=%s handler=%s", name, artifact.handler, exc_info=True)
            return unknown_middleware_rule(name)
        return Prerequisite(
            type="custom_middleware",
            description=description or f"Custom middleware: {name}",
            action=f"Ensure requirements for {name} are met",
            validation=f"Verify {name} middleware passes",
            middleware_class=qualified_name(handler),
        )

    # -- policies -----------------------------------------------------------

    def discover_policy_rules(self, route: Route) -> List[Prerequisite]:
        parsed = route.controller_method()
        if parsed is None:
            return []
        controller, method = parsed
        try:
            prerequisite = self._policy_rule(class_basename(controller), method)
        except Exception:
            logger.warning("policy_discovery_failed action=%s", route.action, exc_info=True)
            return []
        return [prerequisite] if prerequisite is not None else []

    def policy_method_for(self, controller_method: str) -> str:
        return self.method_mapping.get(controller_method, controller_method)

    def find_policy_for_controller(self, controller_name: str) -> Optional[Any]:
        """Try policy names by convention, then subject-type associations."""
        model = controller_name
        if model.endswith(CONTROLLER_SUFFIX):
            model = model[: -len(CONTROLLER_SUFFIX)]
        candidates = (
            f"{model}{POLICY_SUFFIX}",
            f"{controller_name}{POLICY_SUFFIX}",
            f"{singular(model)}{POLICY_SUFFIX}",
        )
        for candidate in dict.fromkeys(candidates):
            policy = self.policy_registry.find(candidate)
            if policy is not None:
                return policy
        return self.policy_registry.for_controller(controller_name)

    def _policy_rule(self, controller_name: str, controller_method: str) -> Optional[Prerequisite]:
        policy = self.find_policy_for_controller(controller_name)
        if policy is None:
            return None
        policy_method = self.policy_method_for(controller_method)
        details = self.introspector.describe_policy_method(policy, policy_method)
        if details is None:
            return None
        return Prerequisite(
            type=POLICY_AUTHORIZATION,
            description=details.description or f"Must pass {policy_method} policy check",
            action=f"Login with user authorized for {policy_method} action",
            validation=f"Verify {policy_method} policy check passes",
            policy=short_name(policy),
            method=policy_method,
            permissions_required=details.permissions,
        )


__all__ = [
    "BUILT_IN_RULES",
    "PARAMETERIZED_RULES",
    "RuleDiscovery",
    "unknown_builtin_rule",
    "unknown_middleware_rule",
]
