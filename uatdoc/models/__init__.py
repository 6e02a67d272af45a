"""Pydantic records shared by the discovery, synthesis and rendering layers."""

from __future__ import annotations

from uatdoc.models.module import (
    Module,
    ModuleFile,
    ModulesOverview,
    ModuleTestSuite,
    ProjectInfo,
    RouteEntry,
    RouteOverview,
    RouteTestCases,
    TestSummary,
    UserRecord,
)
from uatdoc.models.route import Route
from uatdoc.models.rule import POLICY_AUTHORIZATION, Prerequisite, Rule
from uatdoc.models.test_case import TestCase, TestStatus

__all__ = [
    "Module",
    "ModuleFile",
    "ModulesOverview",
    "ModuleTestSuite",
    "POLICY_AUTHORIZATION",
    "Prerequisite",
    "ProjectInfo",
    "Route",
    "RouteEntry",
    "RouteOverview",
    "RouteTestCases",
    "Rule",
    "TestCase",
    "TestStatus",
    "TestSummary",
    "UserRecord",
]
