"""
Tabular renderer - list-of-rows reports (expenses, vendors, audit trail ...).

Part of the report_generator_service package.
"""

from selfaccounting.services.report_generator_service.blocks import (
    SHEET_ONLY,
    TableBlock,
    columns_from_rows,
)
from selfaccounting.services.report_generator_service.column_planner import PRINT, select_columns
from selfaccounting.services.report_generator_service.descriptors import (
    ACCRUAL_REPORT,
    ATTACHMENTS_REPORT,
    AUDIT_TRAIL,
    EMPLOYEE_REPORT,
    EXPENSE_DETAIL,
    EXPENSE_LIST_TYPES,
    EXPENSE_SUMMARY,
    TREND_REPORT,
    VENDOR_REPORT,
)
from selfaccounting.services.report_generator_service.field_semantics import FieldKind
from selfaccounting.services.report_generator_service.renderers.base import RendererStrategy
from selfaccounting.services.report_generator_service.renderers.registry import (
    TABULAR_DEFAULT,
    register_renderer,
)
from selfaccounting.services.report_generator_service.totals import (
    aggregate_by,
    calculate_totals,
    monthly_breakdown,
)

_PIVOT_LABELS = {"count": "Count", "amount": "Amount", "vat": "VAT", "total": "Total"}


@register_renderer(
    EXPENSE_SUMMARY,
    EXPENSE_DETAIL,
    ACCRUAL_REPORT,
    VENDOR_REPORT,
    EMPLOYEE_REPORT,
    TREND_REPORT,
    AUDIT_TRAIL,
    ATTACHMENTS_REPORT,
    TABULAR_DEFAULT,
)
class TabularRenderer(RendererStrategy):
    """One data table; expense lists add pivot tabs to the spreadsheet."""

    def render_sections(self, report, fmt):
        rows = report.rows
        columns = columns_from_rows(rows)
        block = TableBlock(
            None,
            columns,
            rows,
            key="data",
            print_columns=select_columns(self.report_type, columns, PRINT),
        )
        if self.descriptor.show_total and rows:
            block.totals = calculate_totals(rows, columns)

        blocks = [block]
        if self.report_type in EXPENSE_LIST_TYPES and rows:
            blocks.extend(self.pivot_blocks(rows))
        return blocks

    def pivot_blocks(self, rows):
        """Category, vendor and monthly aggregations (spreadsheet only)."""
        blocks = []
        for title, label, keys, fallback in (
            ("Category Summary", "Category", ("category",), "Uncategorized"),
            ("Vendor Summary", "Vendor", ("vendor", "vendorName"), "N/A"),
        ):
            groups = aggregate_by(rows, keys, fallback)
            pivot_rows = [{"label": name, **bucket} for name, bucket in groups.items()]
            blocks.append(TableBlock(
                title,
                ["label", "count", "amount", "vat", "total"],
                pivot_rows,
                key=title.lower().replace(" ", "_"),
                labels={"label": label, **_PIVOT_LABELS},
                kinds={"label": FieldKind.TEXT, "count": FieldKind.NUMBER},
                sheet_name=title,
                targets=SHEET_ONLY,
            ))

        months = [
            {"month": label, "totalSpend": spend, "vat": vat}
            for label, spend, vat in monthly_breakdown(rows)
        ]
        blocks.append(TableBlock(
            "Monthly Breakdown",
            ["month", "totalSpend", "vat"],
            months,
            key="monthly_breakdown",
            labels={"month": "Month", "totalSpend": "Total Spend", "vat": "VAT"},
            kinds={"month": FieldKind.TEXT},
            sheet_name="Monthly Breakdown",
            targets=SHEET_ONLY,
        ))
        return blocks
