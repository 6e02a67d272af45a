"""Functional tests for static middleware rule matching."""

from __future__ import annotations

import logging

import pytest

from uatdoc import rule_registry
from uatdoc.config import UatConfig
from uatdoc.logic.pattern_rules import (
    CLOSURE_MIDDLEWARE,
    OBJECT_MIDDLEWARE,
    classify_opaque_handler,
    match_middleware_rules,
    pattern_prefix,
    resolve,
)
from uatdoc.models.rule import Rule


@pytest.fixture
def tables():
    cfg = UatConfig()
    return cfg.rules.middleware, cfg.rules.pattern


@pytest.mark.parametrize("name", sorted(rule_registry.MIDDLEWARE_RULES))
def test_exact_rule_is_returned_unchanged(tables, name):
    exact, pattern = tables
    assert resolve(name, exact, pattern) == exact[name]
    assert resolve(name, exact, pattern).model_dump() == dict(rule_registry.MIDDLEWARE_RULES[name])


def test_exact_key_wins_over_matching_pattern(tables):
    exact, pattern = tables
    # auth:token is both an exact key and covered by auth:*
    rule = resolve("auth:token", exact, pattern)
    assert rule.type == "token_authentication"


@pytest.mark.parametrize(
    "name,suffix,expected_type",
    [
        ("role:admin", "admin", "role_authorization"),
        ("permission:posts.edit", "posts.edit", "permission_authorization"),
        ("can:publish", "publish", "gate_authorization"),
        ("throttle:60,1", "60,1", "rate_limiting"),
        ("auth:sanctum", "sanctum", "guard_authentication"),
    ],
)
def test_pattern_rule_substitutes_every_placeholder(tables, name, suffix, expected_type):
    exact, pattern = tables
    rule = resolve(name, exact, pattern)
    assert rule is not None
    assert rule.type == expected_type
    assert "{placeholder}" not in rule.description + rule.action + rule.validation
    source = next(r for k, r in pattern.items() if name.startswith(k[:-1]))
    for field in ("description", "action", "validation"):
        expected = getattr(source, field).replace("{placeholder}", suffix)
        assert getattr(rule, field) == expected


def test_first_declared_pattern_wins_on_overlap():
    broad = Rule(type="broad", description="{placeholder}", action="a", validation="v")
    narrow = Rule(type="narrow", description="{placeholder}", action="a", validation="v")
    rule = resolve("auth:admin-panel", {}, {"auth:*": broad, "auth:admin*": narrow})
    assert rule.type == "broad"
    assert rule.description == "admin-panel"
    rule = resolve("auth:admin-panel", {}, {"auth:admin*": narrow, "auth:*": broad})
    assert rule.type == "narrow"
    assert rule.description == "-panel"


@pytest.mark.parametrize("key", ["role", "*role", "ro*le:*", "role:**"])
def test_malformed_pattern_keys_never_match(key):
    rule = Rule(type="x", description="d", action="a", validation="v")
    assert pattern_prefix(key) is None
    assert resolve("role:admin", {}, {key: rule}) is None


def test_bare_wildcard_has_no_prefix_and_matches_nothing():
    catch_all = Rule(type="catch_all", description="{placeholder}", action="a", validation="v")
    assert pattern_prefix("*") is None
    assert resolve("web", {}, {"*": catch_all}) is None
    assert resolve("role:admin", {}, {"*": catch_all}) is None


def test_unknown_name_resolves_to_none(tables):
    exact, pattern = tables
    assert resolve("signed", exact, pattern) is None


def test_match_skips_unknown_names_and_logs_debug(tables, caplog):
    exact, pattern = tables
    with caplog.at_level(logging.DEBUG, logger="uatdoc"):
        found = match_middleware_rules(["web", "auth", "role:editor"], exact, pattern)
    assert [p.type for p in found] == ["authentication", "role_authorization"]
    assert "unknown_middleware name=web" in caplog.text


def test_opaque_function_is_closure_middleware():
    def guard():
        return None

    assert classify_opaque_handler(guard).type == CLOSURE_MIDDLEWARE
    assert classify_opaque_handler(lambda: None).type == CLOSURE_MIDDLEWARE


def test_opaque_object_is_object_middleware_with_class_name():
    class TenantGuard:
        pass

    prerequisite = classify_opaque_handler(TenantGuard())
    assert prerequisite.type == OBJECT_MIDDLEWARE
    assert prerequisite.middleware_class.endswith("TenantGuard")
    assert "TenantGuard" in prerequisite.description


def test_opaque_entries_are_classified_in_match(tables):
    exact, pattern = tables
    found = match_middleware_rules([lambda: None, "auth"], exact, pattern)
    assert [p.type for p in found] == [CLOSURE_MIDDLEWARE, "authentication"]
