"""
Shared test fixtures for the report engine tests.

Provides reusable fixtures for:
- Settings with test-friendly limits
- Sample report payloads (expenses, VAT, trial balance, ledger, invoice)
- Small raster images for logo tests
"""

from io import BytesIO

import pytest
from PIL import Image

import selfaccounting.services.brand_service as brand_mod
from selfaccounting.config import Settings


# ---------------------------------------------------------------------------
# Settings and branding
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_brand_cache():
    """Every test starts with a freshly loaded brand."""
    brand_mod._brand_config = None
    yield
    brand_mod._brand_config = None


@pytest.fixture
def report_settings():
    """Settings with a short logo fetch timeout."""
    return Settings(logo_fetch_timeout=2.0)


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


def make_image_bytes(fmt="PNG", size=(40, 20), color=(30, 58, 138)):
    """Encode a solid-colour image."""
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


SVG_BYTES = b'<?xml version="1.0"?><svg xmlns="http://www.w3.org/2000/svg" width="10" height="10"></svg>'


@pytest.fixture
def png_bytes():
    return make_image_bytes("PNG")


@pytest.fixture
def image_factory():
    return make_image_bytes


@pytest.fixture
def svg_bytes():
    return SVG_BYTES


# ---------------------------------------------------------------------------
# Report payloads
# ---------------------------------------------------------------------------


def expense_rows(n=3):
    """Expense rows with every field the expense reports carry."""
    categories = ["Travel", "Meals", "Office Supplies"]
    vendors = ["Emirates", "Cafe Nero", "Office Depot"]
    rows = []
    for i in range(n):
        rows.append({
            "date": f"2024-0{1 + i % 3}-{10 + i % 15:02d}",
            "category": categories[i % 3],
            "type": "expense",
            "vendor": vendors[i % 3],
            "description": f"Expense {i + 1}",
            "amount": 100 + i,
            "vat": 5,
            "total": 105 + i,
            "notes": "internal",
        })
    return rows


@pytest.fixture
def make_expense_rows():
    return expense_rows


@pytest.fixture
def expense_report():
    return {
        "type": "expense_detail",
        "data": expense_rows(3),
        "metadata": {
            "organizationName": "Acme Trading LLC",
            "vatNumber": "100200300400003",
            "currency": "AED",
            "reportPeriod": {"startDate": "2024-01-01", "endDate": "2024-03-31"},
            "generatedAt": "2024-04-02T09:30:00",
            "summary": {
                "totalExpenses": 3,
                "totalAmountBeforeVat": 303,
                "totalVatAmount": 15,
                "totalAmountAfterVat": 318,
                "highestCategorySpend": {"category": "Office Supplies", "amount": 107},
            },
        },
    }


@pytest.fixture
def vat_report():
    return {
        "type": "vat_report",
        "data": {
            "inputVat": 1250.5,
            "outputVat": 4000,
            "netVatPayable": 2749.5,
            "status": "Filed",
            "categoryBreakdown": [
                {"category": "Travel", "taxableAmount": 1000, "vatAmount": 50, "totalAmount": 1050},
                {"category": "Meals", "taxableAmount": 500, "vatAmount": 25, "totalAmount": 525},
            ],
        },
        "metadata": {"organizationName": "Acme Trading LLC", "generatedAt": "2024-04-02T09:30:00"},
    }


@pytest.fixture
def trial_balance_report():
    return {
        "type": "trial_balance",
        "data": {
            "accounts": [
                {"accountCode": "1000", "accountName": "Cash", "accountType": "Asset",
                 "debit": 100, "credit": 0, "balance": 100},
                {"accountCode": "2000", "accountName": "Loan Payable", "accountType": "Liability",
                 "debit": 0, "credit": 100, "balance": 100},
            ],
        },
        "metadata": {"organizationName": "Acme Trading LLC", "generatedAt": "2024-04-02T09:30:00"},
    }


@pytest.fixture
def ledger_report():
    return {
        "type": "general_ledger",
        "data": {
            "accounts": [
                {
                    "accountCode": "1000",
                    "accountName": "Cash",
                    "accountType": "Asset",
                    "openingBalance": 500,
                    "closingBalance": 650,
                    "entries": [
                        {"date": "2024-01-05", "reference": "JV-1", "description": "Sale",
                         "debit": 200, "credit": 0, "balance": 700},
                        {"date": "2024-01-09", "reference": "JV-2", "description": "Rent",
                         "debit": 0, "credit": 50, "balance": 650},
                    ],
                },
                {
                    "accountCode": "4000",
                    "accountName": "Sales",
                    "accountType": "Revenue",
                    "closingBalance": -200,
                    "entries": [
                        {"date": "2024-01-05", "reference": "JV-1", "description": "Sale",
                         "debit": 0, "credit": 200, "balance": -200},
                    ],
                },
            ],
        },
        "metadata": {"organizationName": "Acme Trading LLC", "generatedAt": "2024-04-02T09:30:00"},
    }


@pytest.fixture
def invoice_report():
    return {
        "type": "tax_invoice",
        "data": {
            "invoiceNumber": "INV-0042",
            "invoiceDate": "2024-03-15",
            "dueDate": "2024-04-14",
            "status": "Unpaid",
            "customer": {"name": "Globex FZE", "address": "Dubai Silicon Oasis", "trn": "100999888700003"},
            "lineItems": [
                {"description": "Consulting", "quantity": 2, "unitPrice": 500, "vatRate": 5, "vatAmount": 50},
                {"description": "Travel", "quantity": 1, "unitPrice": 100.5, "vatRate": 5, "vatAmount": 5.03},
            ],
            "paymentTerms": "Net 30",
            "theme": {"colorScheme": "green"},
        },
        "metadata": {
            "organizationName": "Acme Trading LLC",
            "vatNumber": "100200300400003",
            "currency": "AED",
            "generatedAt": "2024-04-02T09:30:00",
        },
    }
