"""Generation entry point.

`create_generator` wires the pieces for a FastAPI application: it snapshots
the route table, builds the registries and the rule discoverer, and picks the
renderer. `UatGenerator.generate` writes the document set for one run.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any, Callable, Iterable, List, Mapping, Optional

import fastapi
from pydantic import BaseModel

from uatdoc.config import UatConfig, load_config
from uatdoc.http.route_snapshot import snapshot_routes
from uatdoc.logic.data_service import DataService, UserProvider
from uatdoc.logic.introspection import MiddlewareRegistry, PolicyRegistry
from uatdoc.logic.prerequisites import PrerequisiteResolver
from uatdoc.logic.rule_discovery import RuleDiscovery
from uatdoc.logic.test_suite import build_module_test_suite
from uatdoc.presentation import Presentation, build_modules_overview, module_file_name, presentation_for


logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


class GenerationResult(BaseModel):
    directory: Path
    generated_files: List[Path]
    date: str


class UatGenerator:
    def __init__(
        self,
        data_service: DataService,
        presentation: Presentation,
        directory: str | Path = "uat",
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.data_service = data_service
        self.presentation = presentation
        self.directory = Path(directory)
        self._today = today or date.today

    def _prepare(self, target: Path) -> None:
        if target.exists():
            stale = [p for p in target.iterdir() if p.is_file()]
            for path in stale:
                path.unlink()
            if stale:
                logger.info("output_cleaned directory=%s removed=%s", target, len(stale))
        else:
            target.mkdir(parents=True, exist_ok=True)

    def _write(self, target: Path, name: str, content: str, written: List[Path]) -> None:
        path = target / name
        path.write_text(content, encoding="utf-8")
        written.append(path)
        logger.debug("document_written path=%s", path)

    def generate(self, output_dir: Optional[str | Path] = None) -> GenerationResult:
        """Write the full document set and report what was produced."""
        run_date = self._today().strftime(DATE_FORMAT)
        target = Path(output_dir) if output_dir else self.directory / run_date
        self._prepare(target)

        ext = self.presentation.extension
        written: List[Path] = []

        info = self.data_service.get_project_information()
        self._write(target, f"01-project-info.{ext}", self.presentation.render_project_info(info), written)

        users = self.data_service.get_users()
        self._write(target, f"02-users.{ext}", self.presentation.render_users(users), written)

        modules = self.data_service.get_available_modules()
        overview = build_modules_overview(modules, ext, info.generated_at)
        self._write(
            target,
            f"03-available-modules.{ext}",
            self.presentation.render_available_modules(overview),
            written,
        )

        for index, module in enumerate(modules):
            suite = build_module_test_suite(module, index)
            self._write(
                target,
                module_file_name(index, module.name, ext),
                self.presentation.render_module_test_suite(suite),
                written,
            )

        logger.info("uat_generated directory=%s files=%s modules=%s", target, len(written), len(modules))
        return GenerationResult(directory=target, generated_files=written, date=run_date)


def create_generator(
    app: Any,
    config: Optional[UatConfig] = None,
    middleware_handlers: Optional[Mapping[str, Any]] = None,
    policies: Optional[Mapping[str, Any] | Iterable[Any]] = None,
    policy_subjects: Optional[Mapping[Any, Any]] = None,
    discovery: bool = True,
    user_provider: Optional[UserProvider] = None,
    project_root: Optional[Path] = None,
    output_format: Optional[str] = None,
    clock: Optional[Callable[[], str]] = None,
    today: Optional[Callable[[], date]] = None,
) -> UatGenerator:
    """Build a generator for a FastAPI application."""
    config = config or load_config()
    middleware_registry = MiddlewareRegistry(middleware_handlers)
    routes = snapshot_routes(app, middleware_registry, config.middleware_groups)

    discoverer = None
    if discovery:
        discoverer = RuleDiscovery(
            middleware_registry=middleware_registry,
            policy_registry=PolicyRegistry(policies, policy_subjects),
            method_mapping=config.method_mapping,
            middleware_groups=config.middleware_groups,
        )

    data_service = DataService(
        routes=routes,
        config=config,
        resolver=PrerequisiteResolver.from_config(config, discoverer),
        user_provider=user_provider,
        project_root=project_root,
        framework="FastAPI",
        framework_version=fastapi.__version__,
        clock=clock,
    )
    presentation = presentation_for(output_format or config.format, clock=clock)
    return UatGenerator(data_service, presentation, directory=config.directory, today=today)


__all__ = ["GenerationResult", "UatGenerator", "create_generator"]
