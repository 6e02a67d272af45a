"""Command line interface: `uatdoc generate --app package.module:app`."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, List, Optional

from pydantic import ValidationError

from uatdoc.config import FORMATS, load_config
from uatdoc.logging_setup import configure_logging
from uatdoc.logic.introspection import import_object
from uatdoc.main import create_generator


logger = logging.getLogger(__name__)


def _load(path: Optional[str]) -> Any:
    return import_object(path) if path else None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="uatdoc", description="Generate UAT documentation from a FastAPI app")
    sub = parser.add_subparsers(dest="cmd", required=True)

    gen = sub.add_parser("generate", help="Write the UAT document set")
    gen.add_argument("--app", required=True, help="Application object, e.g. myproject.main:app")
    gen.add_argument("--output-dir", default=None, help="Target directory (default <directory>/<date>)")
    gen.add_argument("--format", choices=FORMATS, default=None, help="Output format (overrides config)")
    gen.add_argument("--config", default=None, help="Path to a JSON or YAML config file")
    gen.add_argument("--middleware", default=None, help="Mapping of middleware name to handler (module:attr)")
    gen.add_argument("--policies", default=None, help="Policy classes, mapping or iterable (module:attr)")
    gen.add_argument("--policy-subjects", default=None, help="Mapping of subject type to policy (module:attr)")
    gen.add_argument("--no-discovery", action="store_true", help="Use configured rule tables only")
    gen.add_argument("--verbose", "-v", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else "INFO")

    try:
        config = load_config(args.config)
        generator = create_generator(
            _load(args.app),
            config=config,
            middleware_handlers=_load(args.middleware),
            policies=_load(args.policies),
            policy_subjects=_load(args.policy_subjects),
            discovery=not args.no_discovery,
            output_format=args.format,
        )
        result = generator.generate(args.output_dir)
    except (ImportError, AttributeError, ValidationError, ValueError, RuntimeError, OSError) as e:
        logger.error("generation_failed error=%s", e)
        print(f"[uatdoc] ERROR: {e}", file=sys.stderr)
        return 1

    print(f"[uatdoc] {len(result.generated_files)} files written to {result.directory}")
    for path in result.generated_files:
        print(f"  - {path.name}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
