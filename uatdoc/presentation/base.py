"""Renderer contract and helpers shared by the output formats."""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from uatdoc.models.module import Module, ModuleFile, ModulesOverview, ModuleTestSuite, ProjectInfo, UserRecord
from uatdoc.models.test_case import TestCase


# Module documents follow the three front matter files
MODULE_FILE_OFFSET = 4
TEST_USERS_PER_ROLE = 2


class Presentation(Protocol):
    extension: str

    def render_project_info(self, info: ProjectInfo) -> str: ...

    def render_users(self, users: Sequence[UserRecord]) -> str: ...

    def render_available_modules(self, overview: ModulesOverview) -> str: ...

    def render_module_test_suite(self, suite: ModuleTestSuite) -> str: ...


def module_slug(module_name: str) -> str:
    return module_name.lower().replace(" ", "-")


def module_file_name(index: int, module_name: str, extension: str) -> str:
    """File name of the module document at 0-based position `index`."""
    return f"{index + MODULE_FILE_OFFSET:02d}-module-{module_slug(module_name)}.{extension}"


def build_modules_overview(modules: Sequence[Module], extension: str, generated_at: str) -> ModulesOverview:
    return ModulesOverview(
        generated_at=generated_at,
        modules=[
            ModuleFile(
                module=m.name,
                routes_count=len(m.routes),
                file=module_file_name(i, m.name, extension),
            )
            for i, m in enumerate(modules)
        ],
    )


def role_distribution(users: Sequence[UserRecord]) -> Dict[str, int]:
    return dict(Counter(role for user in users for role in user.roles))


def sample_users_by_role(users: Sequence[UserRecord]) -> Dict[str, List[UserRecord]]:
    """Up to two sample users per role, roles in first-seen order."""
    matrix: Dict[str, List[UserRecord]] = {}
    for user in users:
        for role in user.roles:
            bucket = matrix.setdefault(role, [])
            if len(bucket) < TEST_USERS_PER_ROLE and user not in bucket:
                bucket.append(user)
    return matrix


def is_policy_test(test: TestCase) -> bool:
    return test.policy is not None


class TimestampedPresentation:
    """Base for renderers that stamp each document with a generation time."""

    def __init__(self, clock: Optional[Callable[[], str]] = None) -> None:
        self._clock = clock or (lambda: datetime.now().strftime("%Y-%m-%d %H:%M:%S"))

    def now(self) -> str:
        return self._clock()


__all__ = [
    "MODULE_FILE_OFFSET",
    "Presentation",
    "TimestampedPresentation",
    "build_modules_overview",
    "is_policy_test",
    "module_file_name",
    "module_slug",
    "role_distribution",
    "sample_users_by_role",
]
