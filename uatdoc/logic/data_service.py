"""Data collection for one generation run.

Composes the route classifier and the prerequisite resolver over a route
table snapshot, and gathers project and user information for the front
matter documents. No FastAPI imports: the framework name and version are
passed in by the caller.
"""

from __future__ import annotations

import logging
import os
import platform
import tomllib
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Sequence

from uatdoc.config import UatConfig
from uatdoc.logic.prerequisites import PrerequisiteResolver
from uatdoc.logic.route_classifier import group_by_module, select_routes
from uatdoc.models.module import Module, ProjectInfo, RouteEntry, UserRecord
from uatdoc.models.route import Route
from uatdoc.models.rule import Prerequisite


logger = logging.getLogger(__name__)

UserProvider = Callable[[], Iterable[Any]]

DEFAULT_PROJECT_NAME = "Application"
DEFAULT_PROJECT_DESCRIPTION = "Web Application"
DEFAULT_PROJECT_VERSION = "1.0.0"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _now() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def _read_pyproject(project_root: Path) -> dict:
    path = project_root / "pyproject.toml"
    try:
        if not path.exists():
            return {}
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("pyproject_unreadable path=%s error=%s", path, e)
        return {}
    project = data.get("project")
    return project if isinstance(project, dict) else {}


def _to_user_record(user: Any) -> UserRecord:
    if isinstance(user, UserRecord):
        return user
    if isinstance(user, dict):
        return UserRecord.model_validate(user)
    return UserRecord.model_validate(user, from_attributes=True)


class DataService:
    """Route, project and user data for the generator."""

    def __init__(
        self,
        routes: Sequence[Route],
        config: UatConfig,
        resolver: Optional[PrerequisiteResolver] = None,
        user_provider: Optional[UserProvider] = None,
        project_root: Optional[Path] = None,
        framework: str = "FastAPI",
        framework_version: str = "unknown",
        clock: Optional[Callable[[], str]] = None,
    ) -> None:
        self.routes = tuple(routes)
        self.config = config
        self.resolver = resolver or PrerequisiteResolver.from_config(config)
        self.user_provider = user_provider
        self.project_root = project_root or Path.cwd()
        self.framework = framework
        self.framework_version = framework_version
        self._clock = clock or _now

    def get_project_information(self) -> ProjectInfo:
        project = _read_pyproject(self.project_root)
        return ProjectInfo(
            name=str(project.get("name") or DEFAULT_PROJECT_NAME),
            description=str(project.get("description") or DEFAULT_PROJECT_DESCRIPTION),
            version=str(project.get("version") or DEFAULT_PROJECT_VERSION),
            python_version=platform.python_version(),
            framework=self.framework,
            framework_version=self.framework_version,
            environment=os.environ.get("APP_ENV", "production"),
            generated_at=self._clock(),
        )

    def get_users(self) -> List[UserRecord]:
        if self.user_provider is None:
            return []
        return [_to_user_record(u) for u in self.user_provider()]

    def get_available_modules(self) -> List[Module]:
        """Classify the route table and resolve prerequisites per route."""
        selected = select_routes(self.routes, self.config.excluded_prefixes)
        modules: List[Module] = []
        for name, routes in group_by_module(selected).items():
            entries = [
                RouteEntry(route=route, prerequisites=self.get_route_prerequisites(route))
                for route in routes
            ]
            modules.append(Module(name=name, routes=entries))
        logger.info("modules_collected count=%s routes=%s", len(modules), len(selected))
        return modules

    def get_route_prerequisites(self, route: Route, middleware: Optional[Sequence[Any]] = None) -> List[Prerequisite]:
        return self.resolver.resolve_prerequisites(route, middleware)

    def get_middleware_prerequisites(self, middleware: Sequence[Any]) -> List[Prerequisite]:
        return self.resolver.middleware_prerequisites(middleware)


__all__ = ["DataService", "UserProvider"]
