"""UAT documentation generator for FastAPI applications.

Snapshots an application's route table, infers what a tester must set up for
each browsable route (authentication, roles, policies, custom guards) and
writes numbered Markdown or JSON worksheets. Generation logic lives in
`uatdoc/logic/`, the FastAPI adapter in `uatdoc/http/` and the renderers in
`uatdoc/presentation/`.
"""

from __future__ import annotations

from uatdoc.main import GenerationResult, UatGenerator, create_generator

__all__ = ["GenerationResult", "UatGenerator", "create_generator"]
