"""
Renderer registry - report type tag -> RendererStrategy class.

Part of the report_generator_service package.
"""

import logging
from typing import Callable, Dict, Type

logger = logging.getLogger(__name__)

# Pseudo-tags for report types without a dedicated strategy
TABULAR_DEFAULT = "__tabular__"
STRUCTURED_DEFAULT = "__structured__"

_RENDERERS: Dict[str, Type] = {}


def register_renderer(*report_types: str) -> Callable[[Type], Type]:
    """Class decorator registering a strategy for one or more type tags."""

    def decorator(cls: Type) -> Type:
        for report_type in report_types:
            if report_type in _RENDERERS and _RENDERERS[report_type] is not cls:
                raise ValueError(f"Renderer already registered for {report_type!r}")
            _RENDERERS[report_type] = cls
        return cls

    return decorator


def registered_types() -> list:
    return sorted(t for t in _RENDERERS if not t.startswith("__"))


def get_renderer(report):
    """
    Strategy instance for a report

    Unknown types fall back on the data shape: rows render as a generic
    table, nested mappings as a key/value dump.
    """
    cls = _RENDERERS.get(report.type)
    if cls is None:
        default = TABULAR_DEFAULT if report.is_tabular else STRUCTURED_DEFAULT
        logger.debug("No renderer for %r, using %s", report.type, default)
        cls = _RENDERERS[default]
    return cls(report.type)
