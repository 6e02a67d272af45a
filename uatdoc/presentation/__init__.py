"""Document renderers."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from uatdoc.presentation.base import Presentation, build_modules_overview, module_file_name
from uatdoc.presentation.json_output import JsonPresentation
from uatdoc.presentation.markdown import MarkdownPresentation


RENDERERS: Dict[str, Callable[..., Presentation]] = {
    "markdown": MarkdownPresentation,
    "json": JsonPresentation,
}


def presentation_for(fmt: str, clock: Optional[Callable[[], str]] = None) -> Presentation:
    try:
        factory = RENDERERS[fmt]
    except KeyError:
        raise ValueError(f"unsupported output format: {fmt!r}") from None
    return factory(clock=clock)


__all__ = [
    "JsonPresentation",
    "MarkdownPresentation",
    "Presentation",
    "RENDERERS",
    "build_modules_overview",
    "module_file_name",
    "presentation_for",
]
