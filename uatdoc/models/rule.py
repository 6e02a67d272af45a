"""Rule and prerequisite records.

A Rule is the static description of what a middleware or policy demands
from a tester. A Prerequisite is a Rule resolved for a concrete route,
optionally annotated with policy details.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


PLACEHOLDER_TOKEN = "{placeholder}"
RULE_FIELDS = ("type", "description", "action", "validation")
POLICY_AUTHORIZATION = "policy_authorization"


class Rule(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: str
    description: str
    action: str
    validation: str

    @field_validator("type")
    @classmethod
    def type_must_be_non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("rule.type must be a non-empty string")
        return v

    def substitute(self, placeholder: str) -> "Rule":
        """Return a copy with every `{placeholder}` token replaced."""
        return self.model_copy(
            update={
                field: getattr(self, field).replace(PLACEHOLDER_TOKEN, placeholder)
                for field in RULE_FIELDS
            }
        )


class Prerequisite(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    description: str
    action: str
    validation: str
    # Policy inspection extensions
    policy: Optional[str] = None
    method: Optional[str] = None
    permissions_required: List[str] = []
    # Set for custom and object middleware
    middleware_class: Optional[str] = None

    @classmethod
    def from_rule(cls, rule: Rule, **extensions) -> "Prerequisite":
        return cls(**rule.model_dump(), **extensions)

    @property
    def is_policy(self) -> bool:
        return self.type == POLICY_AUTHORIZATION


__all__ = [
    "PLACEHOLDER_TOKEN",
    "POLICY_AUTHORIZATION",
    "RULE_FIELDS",
    "Prerequisite",
    "Rule",
]
