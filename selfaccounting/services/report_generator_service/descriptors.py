"""
Report type descriptors - per-type presentation data in one table.

Titles, page orientation, totals rows, summary card labels and accent
colours live here instead of in per-type branches inside the renderers.

Part of the report_generator_service package.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from selfaccounting.services.report_generator_service.field_semantics import FieldKind

EXPENSE_SUMMARY = "expense_summary"
EXPENSE_DETAIL = "expense_detail"
VAT_REPORT = "vat_report"
BANK_RECONCILIATION = "bank_reconciliation"
ATTACHMENTS_REPORT = "attachments_report"
TRIAL_BALANCE = "trial_balance"
AUDIT_TRAIL = "audit_trail"
VENDOR_REPORT = "vendor_report"
EMPLOYEE_REPORT = "employee_report"
TREND_REPORT = "trend_report"
ACCRUAL_REPORT = "accrual_report"
BALANCE_SHEET = "balance_sheet"
PROFIT_AND_LOSS = "profit_and_loss"
STOCK_BALANCE = "stock_balance"
RECEIVABLES = "receivables"
PAYABLES = "payables"
GENERAL_LEDGER = "general_ledger"
TAX_INVOICE = "tax_invoice"

EXPENSE_LIST_TYPES = (EXPENSE_SUMMARY, EXPENSE_DETAIL)

DEFAULT_ACCENT = "#1e3a8a"


@dataclass(frozen=True)
class CardSpec:
    """One summary card: a label and a dotted path into the report data."""

    label: str
    key: str
    kind: FieldKind = FieldKind.CURRENCY
    emphasis: bool = False


@dataclass(frozen=True)
class ReportTypeDescriptor:
    tag: str
    title: str
    landscape: bool = False
    show_total: bool = False
    accent: str = DEFAULT_ACCENT
    cards: Tuple[CardSpec, ...] = ()
    column_weights: Dict[str, float] = field(default_factory=dict)


_EXPENSE_WEIGHTS = {
    "date": 0.9, "expenseDate": 0.9,
    "category": 1.4,
    "type": 1.0, "expenseType": 1.0,
    "vendor": 1.5, "vendorName": 1.5,
    "description": 1.6,
    "amount": 0.9, "baseAmount": 0.9,
    "vat": 0.8, "vatAmount": 0.8,
    "total": 1.0, "totalAmount": 1.0,
    "currency": 0.6,
    "status": 0.8,
}

DESCRIPTORS = {
    d.tag: d
    for d in (
        ReportTypeDescriptor(
            EXPENSE_SUMMARY, "Expense Summary Report",
            landscape=True, show_total=True, column_weights=_EXPENSE_WEIGHTS,
        ),
        ReportTypeDescriptor(
            EXPENSE_DETAIL, "Expense Detail Report",
            landscape=True, show_total=True, column_weights=_EXPENSE_WEIGHTS,
        ),
        ReportTypeDescriptor(
            VAT_REPORT, "VAT Summary Report",
            cards=(
                CardSpec("Taxable Supplies", "taxableSupplies"),
                CardSpec("Input VAT", "inputVat"),
                CardSpec("Output VAT", "outputVat"),
                CardSpec("Net VAT Payable", "netVatPayable", emphasis=True),
                CardSpec("Status", "status", FieldKind.TEXT),
            ),
        ),
        ReportTypeDescriptor(
            BANK_RECONCILIATION, "Bank Reconciliation Summary",
            landscape=True, accent="#0f766e",
            cards=(
                CardSpec("Reconciliation ID", "reconciliationId", FieldKind.TEXT),
                CardSpec("Total Transactions", "totalTransactions", FieldKind.NUMBER),
                CardSpec("Matched", "matched", FieldKind.NUMBER),
                CardSpec("Unmatched", "unmatched", FieldKind.NUMBER),
                CardSpec("Variance", "variance", emphasis=True),
            ),
            column_weights={"date": 0.9, "description": 2.4, "amount": 1.0, "status": 0.8, "linkedExpenseId": 1.4},
        ),
        ReportTypeDescriptor(ATTACHMENTS_REPORT, "Attachments Report"),
        ReportTypeDescriptor(
            TRIAL_BALANCE, "Trial Balance",
            landscape=True,
            cards=(
                CardSpec("Opening Debit", "summary.openingDebit"),
                CardSpec("Opening Credit", "summary.openingCredit"),
                CardSpec("Opening Balance", "summary.openingBalance"),
                CardSpec("Total Debit", "summary.totalDebit"),
                CardSpec("Total Credit", "summary.totalCredit"),
                CardSpec("Total Balance", "summary.totalBalance", emphasis=True),
                CardSpec("Closing Debit", "summary.closingDebit"),
                CardSpec("Closing Credit", "summary.closingCredit"),
                CardSpec("Closing Balance", "summary.closingBalance", emphasis=True),
            ),
            column_weights={"accountCode": 0.8, "accountName": 2.2, "accountType": 1.1},
        ),
        ReportTypeDescriptor(AUDIT_TRAIL, "Transaction Audit Trail"),
        ReportTypeDescriptor(VENDOR_REPORT, "Vendor Report", show_total=True),
        ReportTypeDescriptor(EMPLOYEE_REPORT, "Employee Report", show_total=True),
        ReportTypeDescriptor(TREND_REPORT, "Monthly Trend Report"),
        ReportTypeDescriptor(ACCRUAL_REPORT, "Accrual Report"),
        ReportTypeDescriptor(
            BALANCE_SHEET, "Balance Sheet",
            cards=(
                CardSpec("Total Assets", "summary.totalAssets"),
                CardSpec("Total Liabilities", "summary.totalLiabilities"),
                CardSpec("Total Equity", "summary.totalEquity"),
                CardSpec("Liabilities + Equity", "summary.totalLiabilitiesAndEquity", emphasis=True),
            ),
            column_weights={"accountCode": 0.8, "accountName": 2.6, "balance": 1.2},
        ),
        ReportTypeDescriptor(
            PROFIT_AND_LOSS, "Profit and Loss Statement",
            accent="#166534",
            cards=(
                CardSpec("Total Revenue", "summary.totalRevenue"),
                CardSpec("Cost of Sales", "summary.totalCostOfSales"),
                CardSpec("Gross Profit", "summary.grossProfit"),
                CardSpec("Operating Expenses", "summary.totalExpenses"),
                CardSpec("Net Profit", "summary.netProfit", emphasis=True),
            ),
        ),
        ReportTypeDescriptor(
            STOCK_BALANCE, "Stock Balance Report",
            landscape=True, accent="#7c2d12",
            cards=(
                CardSpec("Opening Qty", "summary.openingQty", FieldKind.NUMBER),
                CardSpec("Inwards", "summary.inwardsQty", FieldKind.NUMBER),
                CardSpec("Outwards", "summary.outwardsQty", FieldKind.NUMBER),
                CardSpec("Closing Qty", "summary.closingQty", FieldKind.NUMBER),
                CardSpec("Stock Value", "summary.totalValue", emphasis=True),
            ),
            column_weights={"sku": 0.9, "productName": 2.0, "unit": 0.6},
        ),
        ReportTypeDescriptor(
            RECEIVABLES, "Receivables Aging Report",
            cards=(
                CardSpec("Total Invoiced", "summary.totalInvoiced"),
                CardSpec("Total Received", "summary.totalPaid"),
                CardSpec("Outstanding", "summary.totalOutstanding", emphasis=True),
                CardSpec("Overdue", "summary.overdueAmount"),
            ),
            column_weights={"partyName": 1.8, "invoiceNumber": 1.1},
        ),
        ReportTypeDescriptor(
            PAYABLES, "Payables Aging Report",
            accent="#9a3412",
            cards=(
                CardSpec("Total Billed", "summary.totalInvoiced"),
                CardSpec("Total Paid", "summary.totalPaid"),
                CardSpec("Outstanding", "summary.totalOutstanding", emphasis=True),
                CardSpec("Overdue", "summary.overdueAmount"),
            ),
            column_weights={"partyName": 1.8, "invoiceNumber": 1.1},
        ),
        ReportTypeDescriptor(
            GENERAL_LEDGER, "General Ledger",
            landscape=True,
            cards=(
                CardSpec("Total Debit", "summary.totalDebit"),
                CardSpec("Total Credit", "summary.totalCredit"),
            ),
            column_weights={"date": 0.9, "reference": 1.1, "description": 2.6},
        ),
        ReportTypeDescriptor(TAX_INVOICE, "Tax Invoice"),
    )
}

# Summary figures supplied in metadata.summary (expense-style reports)
METADATA_SUMMARY_CARDS = (
    CardSpec("Total Number of Expenses", "totalExpenses", FieldKind.NUMBER),
    CardSpec("Total Amount (Before VAT)", "totalAmountBeforeVat"),
    CardSpec("Total VAT Amount", "totalVatAmount"),
    CardSpec("Total Amount (After VAT)", "totalAmountAfterVat", emphasis=True),
    CardSpec("Average Expense Amount", "averageExpenseAmount"),
    CardSpec("Total Credit Notes", "totalCreditNotes"),
    CardSpec("Total Adjustments", "totalAdjustments"),
)


def default_title(report_type: str) -> str:
    """'stock_ageing' -> 'Stock Ageing'"""
    return " ".join(w.capitalize() for w in (report_type or "report").split("_") if w)


def get_descriptor(report_type: str) -> ReportTypeDescriptor:
    """Descriptor for a type tag; unknown tags get a portrait, untotalled default."""
    descriptor = DESCRIPTORS.get(report_type)
    if descriptor is None:
        descriptor = ReportTypeDescriptor(report_type, default_title(report_type))
    return descriptor


def report_title(report_type: str) -> str:
    return get_descriptor(report_type).title


def lookup(data, path: str) -> Optional[object]:
    """Resolve a dotted path ("summary.totalDebit") in nested mappings."""
    current = data
    for part in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current
