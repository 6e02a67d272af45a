"""Markdown renderer producing printable UAT worksheets."""

from __future__ import annotations

from typing import List, Sequence

from uatdoc.models.module import ModulesOverview, ModuleTestSuite, ProjectInfo, UserRecord
from uatdoc.models.test_case import TestCase
from uatdoc.presentation.base import (
    TimestampedPresentation,
    is_policy_test,
    role_distribution,
    sample_users_by_role,
)


STATUS_LINE = "**Status**: [ ] Pass [ ] Fail [ ] Not Tested"
NOTES_LINE = "**Notes**: ________________________________"
BLANK = "_________________________________________________"


def _table(headers: Sequence[str], rows: Sequence[Sequence[object]]) -> List[str]:
    lines = ["| " + " | ".join(headers) + " |", "|" + "|".join("-" * (len(h) + 2) for h in headers) + "|"]
    lines.extend("| " + " | ".join(str(c) for c in row) + " |" for row in rows)
    return lines


def _numbered(items: Sequence[str]) -> List[str]:
    return [f"{i}. {item}" for i, item in enumerate(items, start=1)]


def _code_paths(text: str, path: str) -> str:
    # Only the trailing navigation target is formatted as code
    suffix = " " + path
    return text[: -len(path)] + f"`{path}`" if text.endswith(suffix) else text


class MarkdownPresentation(TimestampedPresentation):
    extension = "md"

    def render_project_info(self, info: ProjectInfo) -> str:
        lines = [
            "# Project Information",
            "",
            f"> Generated on: {info.generated_at}",
            "",
            "## Basic Information",
            "",
            *_table(
                ["Field", "Value"],
                [
                    ["**Project Name**", info.name],
                    ["**Description**", info.description],
                    ["**Version**", info.version],
                    ["**Environment**", info.environment],
                ],
            ),
            "",
            "## Technical Stack",
            "",
            *_table(
                ["Component", "Version/Configuration"],
                [
                    ["**Python Version**", info.python_version],
                    [f"**{info.framework} Version**", info.framework_version],
                ],
            ),
            "",
            "## UAT Testing Notes",
            "",
            "- This document serves as the foundation for User Acceptance Testing (UAT)",
            "- All testing should be performed in a controlled environment",
            "- Verify all components are properly configured before testing",
            "- Report any discrepancies between expected and actual behavior",
            "",
        ]
        return "\n".join(lines) + "\n"

    def render_users(self, users: Sequence[UserRecord]) -> str:
        lines = [
            "# Users",
            "",
            f"> Generated on: {self.now()}",
            f"> Total Users: {len(users)}",
            "",
            "## Users Overview",
            "",
            *_table(
                ["User ID", "Name", "Email", "Email Verified", "Roles", "Created At"],
                [
                    [
                        u.id,
                        f"**{u.name}**",
                        u.email,
                        "Yes" if u.email_verified else "No",
                        ", ".join(u.roles),
                        u.created_at or "",
                    ]
                    for u in users
                ],
            ),
            "",
            "## User Roles Distribution",
            "",
        ]
        lines.extend(f"- **{role}**: {count} users" for role, count in role_distribution(users).items())
        lines += [
            "",
            "## UAT Test Users",
            "",
            "### Recommended Test User Matrix",
            "",
            "For comprehensive UAT testing, ensure you have test users for each role:",
            "",
        ]
        for role, sample in sample_users_by_role(users).items():
            lines += [f"#### {role} Role", "", "**Available Test Users:**"]
            lines.extend(f"- {u.name} ({u.email})" for u in sample)
            lines.append("")
        lines += [
            "## Pre-UAT User Checklist",
            "",
            "- [ ] All test users have verified email addresses",
            "- [ ] Each role has at least one test user assigned",
            "- [ ] Test user passwords are documented and accessible to UAT team",
            "- [ ] Multi-factor authentication is configured for admin users (if enabled)",
            "- [ ] User permissions are properly assigned and tested",
            "",
        ]
        return "\n".join(lines) + "\n"

    def render_available_modules(self, overview: ModulesOverview) -> str:
        lines = [
            "# Available Modules Overview",
            "",
            f"> Generated on: {overview.generated_at}",
            f"> Total Modules: {overview.total_modules}",
            "",
            "## Modules Summary",
            "",
            *_table(
                ["Module", "Routes", "File"],
                [[f"**{m.module}**", m.routes_count, f"`{m.file}`"] for m in overview.modules],
            ),
            "",
            "## General UAT Testing Guidelines",
            "",
            "### Pre-Testing Checklist",
            "",
            "- [ ] All modules are deployed and accessible",
            "- [ ] Database is properly seeded with test data",
            "- [ ] All external dependencies are available",
            "- [ ] Test users are created for each role",
            "- [ ] Browser compatibility testing setup is ready",
            "",
            "### Testing Methodology",
            "",
            *_numbered(
                [
                    "**Smoke Testing**: Verify all routes are accessible",
                    "**Functional Testing**: Test core business logic for each module",
                    "**Authorization Testing**: Verify role-based access controls",
                    "**Policy Testing**: Verify policy-based authorization rules",
                    "**Integration Testing**: Test module interactions",
                    "**Security Testing**: Test for common vulnerabilities",
                ]
            ),
            "",
            "### Bug Reporting Template",
            "",
            "When reporting issues found during UAT:",
            "",
            "- **Test Case ID**: [TC-XXX-XX-XXX]",
            "- **Module**: [Module Name]",
            "- **Route**: [Route URI]",
            "- **User Role**: [Role being tested]",
            "- **Expected Behavior**: [What should happen]",
            "- **Actual Behavior**: [What actually happened]",
            "- **Steps to Reproduce**: [Detailed steps]",
            "- **Browser/Environment**: [Testing environment details]",
            "- **Severity**: [Critical/High/Medium/Low]",
            "",
        ]
        return "\n".join(lines) + "\n"

    def _render_test(self, test: TestCase, path: str) -> List[str]:
        lines = [
            f"#### {test.id}: {test.name}",
            "",
            f"**Test Objective**: {test.objective}",
            "",
            "**Prerequisites**:",
            *(f"- {p}" for p in test.prerequisites),
            "",
            "**Test Steps**:",
            *_numbered([_code_paths(step, path) for step in test.steps]),
            "",
            f"**Expected Result**: {test.expected_result}",
            "",
        ]
        if is_policy_test(test):
            lines += [f"**Policy**: {test.policy}", f"**Method**: {test.method}"]
            if test.required_permissions:
                lines.append(f"**Required Permissions**: {', '.join(test.required_permissions)}")
            lines.append("")
        lines += [STATUS_LINE, "", NOTES_LINE, ""]
        return lines

    def render_module_test_suite(self, suite: ModuleTestSuite) -> str:
        lines = [
            f"# {suite.module} Module - UAT Test Suite",
            "",
            f"> Generated on: {self.now()}",
            f"> Module: {suite.module}",
            f"> Routes: {suite.routes_count}",
            "",
            "## Module Overview",
            "",
            *_table(
                ["Route URI", "Route Name", "Action", "Middleware", "Prerequisites"],
                [
                    [f"`{row.uri}`", row.name, row.action, ", ".join(row.middleware), row.prerequisite_label]
                    for row in suite.overview
                ],
            ),
            "",
            "## Test Cases",
            "",
        ]
        for group in suite.test_cases:
            lines += [f"### Route: `{group.route_uri}`", ""]
            if group.prerequisites:
                lines += ["#### Prerequisites", ""]
                for p in group.prerequisites:
                    lines += [
                        f"**{p.type}:**",
                        f"- **Description**: {p.description}",
                        f"- **Setup Action**: {p.action}",
                        f"- **Validation**: {p.validation}",
                        "",
                    ]
            for test in group.tests:
                lines += self._render_test(test, group.route_uri)
            lines += ["---", ""]
        lines += [
            "## Test Summary",
            "",
            *_table(
                ["Status", "Count"],
                [
                    ["**Total Test Cases**", suite.summary.total_test_cases],
                    ["**Passed**", "_____"],
                    ["**Failed**", "_____"],
                    ["**Not Tested**", "_____"],
                ],
            ),
            "",
            "**Test Completion**: _____%",
            "",
            "**Tester Name**: ___________________________",
            "",
            "**Test Date**: _____________________________",
            "",
            "**Notes**:",
            BLANK,
            "",
            BLANK,
            "",
        ]
        return "\n".join(lines) + "\n"


__all__ = ["MarkdownPresentation"]
