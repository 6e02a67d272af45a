"""Module grouping and renderer-facing records."""

from __future__ import annotations

import inspect
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict

from uatdoc.models.route import Route, class_basename
from uatdoc.models.rule import Prerequisite
from uatdoc.models.test_case import TestCase


UNNAMED_ROUTE = "_unnamed_"


def middleware_display_name(entry: Any) -> str:
    """Human label for one middleware entry (names pass through)."""
    if isinstance(entry, str):
        return entry
    if inspect.isfunction(entry) or inspect.ismethod(entry):
        return "Closure"
    if inspect.isclass(entry):
        return entry.__name__
    if entry is not None:
        return type(entry).__name__
    return "Unknown"


class RouteEntry(BaseModel):
    """A classified route together with its resolved prerequisites."""

    model_config = ConfigDict(frozen=True)

    route: Route
    prerequisites: List[Prerequisite] = []

    @property
    def uri(self) -> str:
        return self.route.uri

    @property
    def path(self) -> str:
        """URI as a browser path, always with one leading slash."""
        return "/" + self.route.uri.lstrip("/")

    @property
    def display_name(self) -> str:
        return self.route.name or UNNAMED_ROUTE

    @property
    def action_label(self) -> str:
        return class_basename(self.route.action)

    @property
    def middleware_display(self) -> List[str]:
        return [middleware_display_name(m) for m in self.route.middleware]


class Module(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    routes: List[RouteEntry] = []

    @property
    def prefix(self) -> str:
        return self.name[:3].upper()


class RouteOverview(BaseModel):
    uri: str
    name: str
    action: str
    middleware: List[str]
    prerequisite_count: int

    @property
    def prerequisite_label(self) -> str:
        return f"{self.prerequisite_count} item(s)" if self.prerequisite_count else "None"


class RouteTestCases(BaseModel):
    route_uri: str
    prerequisites: List[Prerequisite]
    tests: List[TestCase]


class TestSummary(BaseModel):
    __test__ = False

    total_test_cases: int
    passed: int = 0
    failed: int = 0
    not_tested: int
    completion_percentage: int = 0


class ModuleTestSuite(BaseModel):
    """Everything a renderer needs to emit one module document."""

    module: str
    index: int
    routes_count: int
    overview: List[RouteOverview]
    test_cases: List[RouteTestCases]
    summary: TestSummary

    def all_tests(self) -> List[TestCase]:
        return [tc for group in self.test_cases for tc in group.tests]


class ProjectInfo(BaseModel):
    name: str
    description: str
    version: str
    python_version: str
    framework: str
    framework_version: str
    environment: str
    generated_at: str


class UserRecord(BaseModel):
    id: Any
    name: str
    email: str
    email_verified: bool = False
    roles: List[str] = []
    created_at: Optional[str] = None


class ModuleFile(BaseModel):
    module: str
    routes_count: int
    file: str


class ModulesOverview(BaseModel):
    generated_at: str
    modules: List[ModuleFile]

    @property
    def total_modules(self) -> int:
        return len(self.modules)


__all__ = [
    "Module",
    "ModuleFile",
    "ModuleTestSuite",
    "ModulesOverview",
    "ProjectInfo",
    "RouteEntry",
    "RouteOverview",
    "RouteTestCases",
    "TestSummary",
    "UNNAMED_ROUTE",
    "UserRecord",
    "middleware_display_name",
]
