"""JSON renderer.

Module documents follow `docs/schemas/ModuleTestSuite.schema.json`. Test
status is emitted as a checklist object so a tester can flip one flag.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Sequence

from uatdoc.models.module import ModulesOverview, ModuleTestSuite, ProjectInfo, UserRecord
from uatdoc.models.test_case import TestCase, TestStatus
from uatdoc.presentation.base import (
    TimestampedPresentation,
    is_policy_test,
    role_distribution,
    sample_users_by_role,
)


def _dumps(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=4, ensure_ascii=False)


def status_flags(status: TestStatus) -> Dict[str, bool]:
    return {s.value: s == status for s in TestStatus}


def case_payload(test: TestCase) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "test_id": test.id,
        "test_name": test.name,
        "test_objective": test.objective,
        "prerequisites": list(test.prerequisites),
        "test_steps": list(test.steps),
        "expected_result": test.expected_result,
    }
    if is_policy_test(test):
        payload["policy"] = test.policy
        payload["method"] = test.method
        payload["required_permissions"] = list(test.required_permissions or [])
    payload["status"] = status_flags(test.status)
    payload["notes"] = test.notes
    return payload


class JsonPresentation(TimestampedPresentation):
    extension = "json"

    def render_project_info(self, info: ProjectInfo) -> str:
        return _dumps(
            {
                "title": "Project Information",
                "generated_at": info.generated_at,
                "basic_information": {
                    "project_name": info.name,
                    "description": info.description,
                    "version": info.version,
                    "environment": info.environment,
                },
                "technical_stack": {
                    "python_version": info.python_version,
                    "framework": info.framework,
                    "framework_version": info.framework_version,
                },
                "uat_testing_notes": {
                    "foundation": "This document serves as the foundation for User Acceptance Testing (UAT)",
                    "environment": "All testing should be performed in a controlled environment",
                    "configuration": "Verify all components are properly configured before testing",
                    "reporting": "Report any discrepancies between expected and actual behavior",
                },
            }
        )

    def render_users(self, users: Sequence[UserRecord]) -> str:
        matrix = {
            role: {
                "available_users": [u.model_dump(mode="json") for u in sample],
                "has_users": bool(sample),
            }
            for role, sample in sample_users_by_role(users).items()
        }
        return _dumps(
            {
                "title": "Users",
                "generated_at": self.now(),
                "total_users": len(users),
                "users_overview": [u.model_dump(mode="json") for u in users],
                "user_roles_distribution": role_distribution(users),
                "uat_test_users": {
                    "description": "For comprehensive UAT testing, ensure you have test users for each role",
                    "recommended_test_user_matrix": matrix,
                },
                "pre_uat_user_checklist": {
                    "verified_emails": "All test users have verified email addresses",
                    "role_coverage": "Each role has at least one test user assigned",
                    "password_documentation": "Test user passwords are documented and accessible to UAT team",
                    "mfa_configuration": "Multi-factor authentication is configured for admin users (if enabled)",
                    "permission_testing": "User permissions are properly assigned and tested",
                },
            }
        )

    def render_available_modules(self, overview: ModulesOverview) -> str:
        return _dumps(
            {
                "title": "Available Modules Overview",
                "generated_at": overview.generated_at,
                "total_modules": overview.total_modules,
                "modules_summary": [m.model_dump() for m in overview.modules],
                "general_uat_testing_guidelines": {
                    "pre_testing_checklist": {
                        "modules_deployed": "All modules are deployed and accessible",
                        "database_seeded": "Database is properly seeded with test data",
                        "external_dependencies": "All external dependencies are available",
                        "test_users_created": "Test users are created for each role",
                        "browser_compatibility": "Browser compatibility testing setup is ready",
                    },
                    "testing_methodology": {
                        "smoke_testing": "Verify all routes are accessible",
                        "functional_testing": "Test core business logic for each module",
                        "authorization_testing": "Verify role-based access controls",
                        "policy_testing": "Verify policy-based authorization rules",
                        "integration_testing": "Test module interactions",
                        "security_testing": "Test for common vulnerabilities",
                    },
                    "bug_reporting_template": {
                        "description": "When reporting issues found during UAT",
                        "fields": {
                            "test_case_id": "[TC-XXX-XX-XXX]",
                            "module": "[Module Name]",
                            "route": "[Route URI]",
                            "user_role": "[Role being tested]",
                            "expected_behavior": "[What should happen]",
                            "actual_behavior": "[What actually happened]",
                            "steps_to_reproduce": "[Detailed steps]",
                            "browser_environment": "[Testing environment details]",
                            "severity": "[Critical/High/Medium/Low]",
                        },
                    },
                },
            }
        )

    def module_payload(self, suite: ModuleTestSuite) -> Dict[str, Any]:
        return {
            "title": f"{suite.module} Module - UAT Test Suite",
            "generated_at": self.now(),
            "module": suite.module,
            "routes_count": suite.routes_count,
            "module_overview": [
                {
                    "uri": row.uri,
                    "name": row.name,
                    "action": row.action,
                    "middleware": ", ".join(row.middleware),
                    "prerequisites": row.prerequisite_label,
                }
                for row in suite.overview
            ],
            "test_cases": [
                {
                    "route_uri": group.route_uri,
                    "prerequisites": [p.model_dump(mode="json", exclude_defaults=True) for p in group.prerequisites],
                    "tests": [case_payload(t) for t in group.tests],
                }
                for group in suite.test_cases
            ],
            "test_summary": {
                **suite.summary.model_dump(),
                "tester_name": "",
                "test_date": "",
                "notes": "",
            },
        }

    def render_module_test_suite(self, suite: ModuleTestSuite) -> str:
        return _dumps(self.module_payload(suite))


__all__ = ["JsonPresentation", "status_flags", "case_payload"]
