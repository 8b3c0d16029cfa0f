"""
Fallback renderer - generic key/value dump for unknown structured reports.

Part of the report_generator_service package.
"""

from collections.abc import Mapping

from selfaccounting.currency_utils import format_header_label
from selfaccounting.services.report_generator_service.blocks import (
    Card,
    KeyValueBlock,
    TableBlock,
    columns_from_rows,
)
from selfaccounting.services.report_generator_service.field_semantics import (
    FieldKind,
    classify_field,
)
from selfaccounting.services.report_generator_service.renderers.base import RendererStrategy
from selfaccounting.services.report_generator_service.renderers.registry import (
    STRUCTURED_DEFAULT,
    register_renderer,
)


def _card(key, value) -> Card:
    kind = classify_field(key).kind
    if isinstance(value, str) and kind != FieldKind.DATE:
        kind = FieldKind.TEXT
    return Card(format_header_label(key), value, kind)


@register_renderer(STRUCTURED_DEFAULT)
class FallbackRenderer(RendererStrategy):
    """Top-level scalars as "Details", nested mappings and row lists as their own sections."""

    def render_sections(self, report, fmt):
        data = report.payload
        details = []
        sections = []
        for key, value in data.items():
            if isinstance(value, Mapping):
                sections.append(KeyValueBlock(
                    format_header_label(key),
                    [_card(k, v) for k, v in value.items()],
                    key=key,
                ))
            elif isinstance(value, list) and all(isinstance(v, Mapping) for v in value):
                rows = list(value)
                sections.append(TableBlock(
                    format_header_label(key), columns_from_rows(rows), rows, key=key, sheet_name=None,
                ))
            else:
                details.append(_card(key, value))

        blocks = []
        if details:
            blocks.append(KeyValueBlock("Details", details, key="details"))
        blocks.extend(sections)
        if not blocks:
            blocks.append(TableBlock(None, [], [], key="data"))
        return blocks
