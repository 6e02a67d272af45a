"""Deterministic synthesis of manual test cases for a module.

Test IDs have the form `TC-<PREFIX>-<RR>-<SSS>`: PREFIX is the first three
letters of the module name upper-cased, RR the 1-based route position and
SSS a counter that restarts at 001 for every route and is shared by all test
kinds of that route.
"""

from __future__ import annotations

from typing import List

from uatdoc.models.module import (
    Module,
    ModuleTestSuite,
    RouteEntry,
    RouteOverview,
    RouteTestCases,
    TestSummary,
)
from uatdoc.models.rule import Prerequisite
from uatdoc.models.test_case import TestCase


ROLE_PREFIX = "role:"
AUTH_MIDDLEWARE = "auth"


def make_test_id(module_prefix: str, route_index: int, sequence: int) -> str:
    return f"TC-{module_prefix}-{route_index:02d}-{sequence:03d}"


def _basic_access_test(test_id: str, entry: RouteEntry) -> TestCase:
    return TestCase(
        id=test_id,
        name="Basic Access Test",
        objective="Verify route is accessible and loads without errors",
        prerequisites=[p.description for p in entry.prerequisites] or ["None"],
        steps=[
            f"Navigate to {entry.path}",
            "Wait for page to load completely",
            "Verify page content is displayed",
        ],
        expected_result="Page loads successfully without errors",
    )


def _authentication_test(test_id: str, entry: RouteEntry) -> TestCase:
    return TestCase(
        id=test_id,
        name="Authentication Required Test",
        objective="Verify unauthenticated users are redirected to login",
        prerequisites=["User must be logged out", "Clear all browser sessions"],
        steps=[
            "Ensure user is not logged in",
            f"Navigate directly to {entry.path}",
            "Observe browser behavior",
        ],
        expected_result="User is redirected to login page",
    )


def _role_test(test_id: str, entry: RouteEntry, role: str) -> TestCase:
    return TestCase(
        id=test_id,
        name=f"Role Authorization Test - {role}",
        objective=f"Verify only users with '{role}' role can access route",
        prerequisites=[f"Test user without '{role}' role", f"Test user with '{role}' role"],
        steps=[
            f"Login with user WITHOUT '{role}' role",
            f"Navigate to {entry.path}",
            "Verify access is denied (403 or redirect)",
            f"Logout and login with user WITH '{role}' role",
            f"Navigate to {entry.path}",
            "Verify access is granted",
        ],
        expected_result="Access denied for unauthorized user, granted for authorized user",
    )


def _policy_test(test_id: str, entry: RouteEntry, prerequisite: Prerequisite) -> TestCase:
    permissions = list(prerequisite.permissions_required)
    steps = [
        prerequisite.action,
        f"Navigate to {entry.path}",
        prerequisite.validation,
    ]
    if permissions:
        prerequisites = [f"Test user with '{p}' permission" for p in permissions]
        prerequisites.append("Test user without required permissions")
        steps += [
            "Logout and login with user WITHOUT required permissions",
            f"Navigate to {entry.path}",
            "Verify access is denied (403, 404, or redirect)",
        ]
        expected = "Access granted for authorized user, denied for unauthorized user"
    else:
        prerequisites = ["Test user with appropriate authorization", "Test user without authorization"]
        expected = "Access granted for authorized user"
    return TestCase(
        id=test_id,
        name=f"Policy Authorization Test - {prerequisite.policy}::{prerequisite.method}",
        objective=prerequisite.description,
        prerequisites=prerequisites,
        steps=steps,
        expected_result=expected,
        policy=prerequisite.policy,
        method=prerequisite.method,
        required_permissions=permissions,
    )


def build_route_test_cases(module_prefix: str, route_index: int, entry: RouteEntry) -> List[TestCase]:
    """All test cases for one route, in generation order."""
    tests: List[TestCase] = []

    def next_id() -> str:
        return make_test_id(module_prefix, route_index, len(tests) + 1)

    tests.append(_basic_access_test(next_id(), entry))
    names = entry.route.middleware_names()
    if AUTH_MIDDLEWARE in names:
        tests.append(_authentication_test(next_id(), entry))
    for name in names:
        if name.startswith(ROLE_PREFIX):
            tests.append(_role_test(next_id(), entry, name[len(ROLE_PREFIX):]))
    for prerequisite in entry.prerequisites:
        if prerequisite.is_policy:
            tests.append(_policy_test(next_id(), entry, prerequisite))
    return tests


def build_test_cases(module: Module) -> List[TestCase]:
    return [
        tc
        for index, entry in enumerate(module.routes, start=1)
        for tc in build_route_test_cases(module.prefix, index, entry)
    ]


def build_module_test_suite(module: Module, index: int) -> ModuleTestSuite:
    """Assemble the renderer input for one module (index is the module ordinal)."""
    overview = [
        RouteOverview(
            uri=entry.path,
            name=entry.display_name,
            action=entry.action_label,
            middleware=entry.middleware_display,
            prerequisite_count=len(entry.prerequisites),
        )
        for entry in module.routes
    ]
    groups = [
        RouteTestCases(
            route_uri=entry.path,
            prerequisites=list(entry.prerequisites),
            tests=build_route_test_cases(module.prefix, route_index, entry),
        )
        for route_index, entry in enumerate(module.routes, start=1)
    ]
    total = sum(len(g.tests) for g in groups)
    return ModuleTestSuite(
        module=module.name,
        index=index,
        routes_count=len(module.routes),
        overview=overview,
        test_cases=groups,
        summary=TestSummary(total_test_cases=total, not_tested=total),
    )


__all__ = [
    "build_module_test_suite",
    "build_route_test_cases",
    "build_test_cases",
    "make_test_id",
]
