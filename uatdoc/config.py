"""Configuration utilities for UAT documentation generation.

This module loads generator configuration with the following rules:
- Base: built-in defaults from `uatdoc.rule_registry`.
- Primary source: `uat_config.json` at the project root (or a YAML file
  when an explicit `.yaml`/`.yml` path is given).
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required rule fields and value
  constraints at load time.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from uatdoc import rule_registry
from uatdoc.models.rule import Rule


CONFIG_DIR = Path("config")
ROOT_UAT_CONFIG = Path("uat_config.json")
FORMATS = ("markdown", "json")
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        # Recoverable: log and ignore unreadable override
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _split_list(text: str) -> List[str]:
    return [item.strip() for item in text.replace("\n", ",").split(",") if item.strip()]


class PolicyMethodInfo(BaseModel):
    description: str
    action: str
    validation: str
    permissions: List[str] = Field(default_factory=list)
    roles: List[str] = Field(default_factory=list)


class PolicyMapping(BaseModel):
    policy: str
    methods: Dict[str, PolicyMethodInfo] = Field(default_factory=dict)


class RulesConfig(BaseModel):
    middleware: Dict[str, Rule] = Field(default_factory=dict)
    # Dict preserves declared order, which decides pattern precedence
    pattern: Dict[str, Rule] = Field(default_factory=dict)

    @field_validator("pattern")
    @classmethod
    def warn_on_unusable_patterns(cls, v: Dict[str, Rule]) -> Dict[str, Rule]:
        for key in v:
            if not key.endswith("*") or key.count("*") != 1:
                # Not fatal: such keys never match at resolution time
                logger.warning("pattern_rule_ignored key=%s reason=needs_single_trailing_wildcard", key)
            elif key == "*":
                logger.warning("pattern_rule_ignored key=%s reason=empty_prefix", key)
        return v


class UatConfig(BaseModel):
    directory: str = "uat"
    format: str = "markdown"
    excluded_prefixes: List[str] = Field(default_factory=lambda: list(rule_registry.EXCLUDED_PREFIXES))
    middleware_groups: List[str] = Field(default_factory=lambda: list(rule_registry.MIDDLEWARE_GROUPS))
    method_mapping: Dict[str, str] = Field(default_factory=lambda: dict(rule_registry.METHOD_MAPPING))
    rules: RulesConfig = Field(
        default_factory=lambda: RulesConfig(
            middleware=rule_registry.MIDDLEWARE_RULES,
            pattern=rule_registry.PATTERN_RULES,
        )
    )
    policy_mappings: Dict[str, PolicyMapping] = Field(default_factory=lambda: dict(rule_registry.POLICY_MAPPINGS))

    @field_validator("directory")
    @classmethod
    def directory_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("directory must be a non-empty string")
        return v

    @field_validator("format")
    @classmethod
    def format_must_be_allowed(cls, v: str) -> str:
        v = str(v).strip().lower()
        if v not in FORMATS:
            raise ValueError(f"format must be one of {list(FORMATS)}")
        return v


def _read_structured_file(path: Path) -> Dict[str, Any]:
    """Read a JSON or YAML mapping; missing or unreadable files yield {}."""
    try:
        if not path.exists():
            return {}
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        logger.error("Failed to read config %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.error("Config %s must contain a mapping, got %s", path, type(data).__name__)
        return {}
    return data


def load_config(path: Optional[str | Path] = None) -> UatConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) The given path, else uat_config.json at project root
    4) Built-in defaults from `uatdoc.rule_registry`

    Rule tables from the file replace the defaults per table; an explicit
    empty table disables it.
    """

    base = _read_structured_file(Path(path) if path else ROOT_UAT_CONFIG)

    directory = _env("UAT_DIRECTORY") or _read_config_file("uat.directory") or base.get("directory")
    fmt = _env("UAT_FORMAT") or _read_config_file("uat.format") or base.get("format")
    prefixes_text = _env("UAT_EXCLUDED_PREFIXES") or _read_config_file("uat.excluded_prefixes")

    data: Dict[str, Any] = dict(base)
    if directory:
        data["directory"] = directory
    if fmt:
        data["format"] = fmt
    if prefixes_text is not None:
        data["excluded_prefixes"] = _split_list(prefixes_text)
    rules = data.get("rules")
    if isinstance(rules, dict):
        data["rules"] = {
            "middleware": rules.get("middleware", rule_registry.MIDDLEWARE_RULES),
            "pattern": rules.get("pattern", rule_registry.PATTERN_RULES),
        }

    try:
        return UatConfig(**data)
    except PydanticValidationError as e:
        # Surface actionable message before propagating
        logger.error("Invalid UAT configuration: %s", e)
        raise


__all__ = [
    "FORMATS",
    "PolicyMapping",
    "PolicyMethodInfo",
    "RulesConfig",
    "UatConfig",
    "load_config",
]
