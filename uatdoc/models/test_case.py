"""Test case records emitted for manual acceptance testing.

`status` and `notes` are the only fields a tester changes; they are filled
in after the document has been produced.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class TestStatus(str, Enum):
    __test__ = False

    PASS = "pass"
    FAIL = "fail"
    NOT_TESTED = "not_tested"


class TestCase(BaseModel):
    __test__ = False

    id: str
    name: str
    objective: str
    prerequisites: List[str]
    steps: List[str]
    expected_result: str
    status: TestStatus = TestStatus.NOT_TESTED
    notes: str = ""
    # Present on policy authorization tests only
    policy: Optional[str] = None
    method: Optional[str] = None
    required_permissions: Optional[List[str]] = None


__all__ = ["TestCase", "TestStatus"]
