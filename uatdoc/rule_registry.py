"""Static default rule tables.

Single source of truth for the built-in configuration defaults. The config
loader validates these into `Rule` records and layers file and environment
overrides on top; nothing else should hardcode rule text.
"""

from __future__ import annotations

from typing import Dict, List, Mapping


EXCLUDED_PREFIXES: List[str] = [
    "docs",
    "redoc",
    "openapi.json",
    "static",
    "_debug",
    "health",
    "metrics",
    "api/",
    "admin/debug",
    "impersonate",
    "errors",
    "test",
]

# Route groups that carry no precondition of their own
MIDDLEWARE_GROUPS: List[str] = ["web", "api"]

# Controller method -> policy method
METHOD_MAPPING: Dict[str, str] = {
    "index": "viewAny",
    "show": "view",
    "create": "create",
    "store": "create",
    "edit": "update",
    "update": "update",
    "destroy": "delete",
}

MIDDLEWARE_RULES: Dict[str, Mapping[str, str]] = {
    "auth": {
        "type": "authentication",
        "description": "User must be logged in",
        "action": "Navigate to /login and authenticate with valid credentials",
        "validation": "Verify user session is active",
    },
    "auth:token": {
        "type": "token_authentication",
        "description": "User must be authenticated with a bearer token",
        "action": "Login or provide a valid API token",
        "validation": "Verify the token guard accepts the request",
    },
    "verified": {
        "type": "email_verification",
        "description": "User email must be verified",
        "action": "Ensure test user has verified email address",
        "validation": "Check the user's email verification timestamp is set",
    },
}

# Declared order matters: the first matching prefix wins
PATTERN_RULES: Dict[str, Mapping[str, str]] = {
    "role:*": {
        "type": "role_authorization",
        "description": "User must have '{placeholder}' role",
        "action": "Login with user assigned to '{placeholder}' role",
        "validation": "Verify user has '{placeholder}' role assigned",
    },
    "permission:*": {
        "type": "permission_authorization",
        "description": "User must have '{placeholder}' permission",
        "action": "Login with user having '{placeholder}' permission",
        "validation": "Verify user has '{placeholder}' permission directly or via role",
    },
    "can:*": {
        "type": "gate_authorization",
        "description": "User must pass '{placeholder}' gate check",
        "action": "Login with user authorized for '{placeholder}' gate",
        "validation": "Verify gate check passes for current user",
    },
    "throttle:*": {
        "type": "rate_limiting",
        "description": "Request must not exceed rate limit for '{placeholder}' limiter",
        "action": "Ensure test requests stay within rate limit bounds",
        "validation": "Verify rate limiting headers and 429 responses when exceeded",
    },
    "auth:*": {
        "type": "guard_authentication",
        "description": "User must be authenticated with '{placeholder}' guard",
        "action": "Authenticate using the specified guard",
        "validation": "Verify authentication state for the specified guard",
    },
}

# Controller short name -> policy and per-method requirements
POLICY_MAPPINGS: Dict[str, Mapping[str, object]] = {}


__all__ = [
    "EXCLUDED_PREFIXES",
    "METHOD_MAPPING",
    "MIDDLEWARE_GROUPS",
    "MIDDLEWARE_RULES",
    "PATTERN_RULES",
    "POLICY_MAPPINGS",
]
