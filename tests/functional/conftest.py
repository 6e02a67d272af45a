"""Functional test fixtures.

Tests run against the FastAPI app in `uat_sample_app.py`. Each test that
touches configuration or writes documents gets its own working directory so
a stray `uat_config.json` or `config/` override never leaks in.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Callable, List

import pytest

import uat_sample_app
from uatdoc.config import UatConfig
from uatdoc.http.route_snapshot import snapshot_routes
from uatdoc.logic.introspection import MiddlewareRegistry, PolicyRegistry
from uatdoc.logic.rule_discovery import RuleDiscovery
from uatdoc.models.route import Route


FIXED_TIMESTAMP = "2026-01-15 09:30:00"


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in ("UAT_DIRECTORY", "UAT_FORMAT", "UAT_EXCLUDED_PREFIXES", "APP_ENV"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def sample_app():
    return uat_sample_app.create_app()


@pytest.fixture
def middleware_registry() -> MiddlewareRegistry:
    return MiddlewareRegistry(uat_sample_app.MIDDLEWARE)


@pytest.fixture
def policy_registry() -> PolicyRegistry:
    return PolicyRegistry(uat_sample_app.POLICIES, uat_sample_app.POLICY_SUBJECTS)


@pytest.fixture
def discovery(middleware_registry: MiddlewareRegistry, policy_registry: PolicyRegistry) -> RuleDiscovery:
    return RuleDiscovery(middleware_registry=middleware_registry, policy_registry=policy_registry)


@pytest.fixture
def sample_routes(sample_app, middleware_registry: MiddlewareRegistry) -> List[Route]:
    return snapshot_routes(sample_app, middleware_registry)


@pytest.fixture
def config() -> UatConfig:
    return UatConfig()


@pytest.fixture
def fixed_clock() -> Callable[[], str]:
    return lambda: FIXED_TIMESTAMP


@pytest.fixture
def fixed_today() -> Callable[[], date]:
    return lambda: date(2026, 1, 15)
