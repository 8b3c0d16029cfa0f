"""
Structured report renderers.

Importing this package registers every strategy:
- tabular: list-of-rows reports (and the default for unknown tabular types)
- fallback: key/value dump for unknown structured types
- vat, bank_reconciliation, trial_balance, balance_sheet, profit_and_loss,
  stock_balance, receivables_payables, general_ledger, tax_invoice
"""

from selfaccounting.services.report_generator_service.renderers import (  # noqa: F401
    balance_sheet,
    bank_reconciliation,
    fallback,
    general_ledger,
    profit_and_loss,
    receivables_payables,
    stock_balance,
    tabular,
    tax_invoice,
    trial_balance,
    vat,
)
from selfaccounting.services.report_generator_service.renderers.base import (  # noqa: F401
    RendererStrategy,
    metadata_summary_band,
)
from selfaccounting.services.report_generator_service.renderers.registry import (  # noqa: F401
    get_renderer,
    register_renderer,
    registered_types,
)


def build_blocks(report, fmt, strategy=None) -> list:
    """Every block of a report, in document order (metadata summary first)."""
    strategy = strategy or get_renderer(report)
    blocks = []
    band = metadata_summary_band(report, fmt)
    if band is not None:
        blocks.append(band)
    blocks.extend(b for b in strategy.render_summary(report, fmt) if b is not None)
    blocks.extend(b for b in strategy.render_sections(report, fmt) if b is not None)
    return blocks
