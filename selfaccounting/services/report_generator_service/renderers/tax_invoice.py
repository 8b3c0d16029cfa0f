"""
Tax invoice renderer - a fixed single-document layout.

Unlike the report renderers, the invoice prints its own page header
(logo, "TAX INVOICE" and the invoice identifiers), a company block beside
a bill-to block, the line items, a totals block, the amount in words, and
payment terms. It is the only renderer that takes a colour theme
(``data.theme.accentColor`` or a named ``data.theme.colorScheme``).

Part of the report_generator_service package.
"""

from decimal import Decimal

from selfaccounting.currency_utils import amount_in_words, to_decimal
from selfaccounting.services.brand_service import hex_to_rgb
from selfaccounting.services.report_generator_service.blocks import (
    Card,
    KeyValueBlock,
    TextBlock,
)
from selfaccounting.services.report_generator_service.descriptors import DEFAULT_ACCENT, TAX_INVOICE
from selfaccounting.services.report_generator_service.field_semantics import FieldKind
from selfaccounting.services.report_generator_service.pdf_blocks import card_text, write_table_block
from selfaccounting.services.report_generator_service.pdf_layout import (
    PaginationController,
    Palette,
)
from selfaccounting.services.report_generator_service.renderers.base import (
    RendererStrategy,
    decimal_sum,
    present_columns,
)
from selfaccounting.services.report_generator_service.renderers.registry import register_renderer

LINE_COLUMNS = ["description", "quantity", "unitPrice", "vatRate", "vatAmount", "total"]
LINE_LABELS = {
    "description": "Description",
    "quantity": "Qty",
    "unitPrice": "Unit Price",
    "vatRate": "VAT %",
    "vatAmount": "VAT",
    "total": "Amount",
}
LINE_WEIGHTS = {"description": 3.2, "quantity": 0.7, "unitPrice": 1.1, "vatRate": 0.8, "vatAmount": 1.0, "total": 1.2}

COLOR_SCHEMES = {
    "blue": "#1e3a8a",
    "green": "#166534",
    "red": "#991b1b",
    "purple": "#6b21a8",
    "orange": "#c2410c",
    "teal": "#0f766e",
    "gray": "#374151",
}

INVOICE_HEADER_HEIGHT = 100.0


def theme_accent(data) -> str:
    """Accent colour from the invoice theme (hex, or a named scheme)."""
    theme = data.get("theme") if isinstance(data.get("theme"), dict) else {}
    accent = theme.get("accentColor")
    if accent and len(str(accent).lstrip("#")) in (3, 6):
        return accent if str(accent).startswith("#") else f"#{accent}"
    return COLOR_SCHEMES.get(str(theme.get("colorScheme") or "").lower(), DEFAULT_ACCENT)


def line_items(data):
    """Line items with a derived ``total`` where the payload omits it."""
    items = []
    raw = data.get("lineItems")
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, dict):
            continue
        row = dict(item)
        if row.get("total") is None:
            qty = to_decimal(row.get("quantity"))
            price = to_decimal(row.get("unitPrice"))
            if qty is not None and price is not None:
                row["total"] = qty * price + (to_decimal(row.get("vatAmount")) or Decimal("0"))
        items.append(row)
    return items


def invoice_totals(data, items):
    """Subtotal, discount, VAT, total, paid and balance, derived where missing."""
    subtotal = data.get("subtotal")
    if subtotal is None and items:
        subtotal = decimal_sum(
            (to_decimal(i.get("quantity")) or Decimal("0")) * (to_decimal(i.get("unitPrice")) or Decimal("0"))
            for i in items
        )
    vat = data.get("vatAmount")
    if vat is None and items:
        vat = decimal_sum(i.get("vatAmount") for i in items)
    total = data.get("total")
    if total is None and subtotal is not None:
        total = decimal_sum([subtotal, vat]) - decimal_sum([data.get("discount")])
    balance = data.get("balanceDue")
    if balance is None and data.get("amountPaid") is not None and total is not None:
        balance = decimal_sum([total]) - decimal_sum([data.get("amountPaid")])

    lines = [("Subtotal", subtotal, False)]
    if to_decimal(data.get("discount")):
        lines.append(("Discount", -(to_decimal(data.get("discount"))), False))
    lines.append(("VAT", vat, False))
    lines.append(("Total", total, True))
    if data.get("amountPaid") is not None:
        lines.append(("Amount Paid", data.get("amountPaid"), False))
    if balance is not None:
        lines.append(("Balance Due", balance, True))
    return [(label, value, emphasis) for label, value, emphasis in lines if value is not None], total


@register_renderer(TAX_INVOICE)
class TaxInvoiceRenderer(RendererStrategy):

    # ----------------------------------------------------------------
    # Blocks (spreadsheet and delimited text)
    # ----------------------------------------------------------------

    def invoice_details(self, data):
        cards = []
        for key, label, kind in (
            ("invoiceNumber", "Invoice Number", FieldKind.TEXT),
            ("invoiceDate", "Invoice Date", FieldKind.DATE),
            ("dueDate", "Due Date", FieldKind.DATE),
            ("status", "Status", FieldKind.TEXT),
        ):
            if data.get(key):
                cards.append(Card(label, data[key], kind))
        return cards

    def customer_details(self, data):
        customer = data.get("customer") if isinstance(data.get("customer"), dict) else {}
        cards = []
        for key, label in (("name", "Name"), ("address", "Address"), ("trn", "TRN"),
                           ("email", "Email"), ("phone", "Phone")):
            if customer.get(key):
                cards.append(Card(label, customer[key], FieldKind.TEXT))
        return cards

    def render_summary(self, report, fmt):
        data = report.payload
        return [KeyValueBlock("Invoice", self.invoice_details(data), key="invoice")]

    def render_sections(self, report, fmt):
        data = report.payload
        items = line_items(data)
        columns = present_columns(items, LINE_COLUMNS, required=("description", "total")) if items else LINE_COLUMNS
        totals, total = invoice_totals(data, items)

        blocks = [
            KeyValueBlock("Bill To", self.customer_details(data), key="bill_to"),
            self.table("Line Items", items, columns, key="line_items", labels=LINE_LABELS, weights=LINE_WEIGHTS),
            KeyValueBlock("Totals", [Card(label, value, FieldKind.CURRENCY, emphasis)
                                     for label, value, emphasis in totals], key="totals"),
        ]
        if total is not None:
            blocks.append(TextBlock("Amount in Words", amount_in_words(total, fmt.currency), key="amount_in_words"))
        for key, title in (("notes", "Notes"), ("paymentTerms", "Payment Terms"),
                           ("termsAndConditions", "Terms & Conditions")):
            if data.get(key):
                blocks.append(TextBlock(title, str(data[key]), key=key))
        bank = data.get("bankDetails") if isinstance(data.get("bankDetails"), dict) else {}
        bank_cards = [Card(label, bank[key], FieldKind.TEXT) for key, label in (
            ("bankName", "Bank"), ("accountName", "Account Name"),
            ("accountNumber", "Account Number"), ("iban", "IBAN"),
        ) if bank.get(key)]
        if bank_cards:
            blocks.append(KeyValueBlock("Bank Details", bank_cards, key="bank_details"))
        return blocks

    # ----------------------------------------------------------------
    # Print layout
    # ----------------------------------------------------------------

    def render_pdf_pages(self, report, fmt, logo, config):
        data = report.payload
        meta = report.metadata
        accent_hex = theme_accent(data)
        accent = hex_to_rgb(accent_hex)
        org_name = meta.organization_name or config.default_organization_name

        def paint_header(ctl):
            x, top, w = ctl.margin, ctl.HEADER_TOP, ctl.content_width
            if logo is not None:
                lh = 50.0
                lw = min(140.0, lh * logo.aspect_ratio)
                ctl.draw_image(logo.data, x, top, lw, lw / logo.aspect_ratio, placeholder=org_name)
            else:
                ctl.draw_text(x, top, w * 0.55, 22, org_name, 16, "B", accent, tag="org_name")
            ctl.draw_text(x + w * 0.5, top, w * 0.5, 24, "TAX INVOICE", 20, "B", accent, "R", tag="title")
            y = top + 28
            for label, value in (
                ("Invoice #", data.get("invoiceNumber")),
                ("Date", fmt.date(data.get("invoiceDate")) if data.get("invoiceDate") else None),
                ("Due", fmt.date(data.get("dueDate")) if data.get("dueDate") else None),
                ("Status", data.get("status")),
            ):
                if value:
                    ctl.draw_text(x + w * 0.5, y, w * 0.5, 12, f"{label}: {value}", 9, "", ctl.palette.text, "R")
                    y += 12
            ctl.draw_line(x, top + INVOICE_HEADER_HEIGHT - 4, x + w, top + INVOICE_HEADER_HEIGHT - 4, accent, 1.5)

        ctl = PaginationController(
            paint_header,
            landscape=False,
            margin=config.pdf_page_margin,
            bottom_margin=config.pdf_bottom_margin,
            header_height=INVOICE_HEADER_HEIGHT,
            palette=Palette.from_brand(accent_hex),
        )

        self._write_parties(ctl, data, meta, org_name, accent)

        blocks = self.render_sections(report, fmt)
        for block in blocks:
            if block.key == "bill_to":
                continue
            if block.key == "line_items":
                write_table_block(ctl, block, fmt, self.report_type, accent)
            elif block.key == "totals":
                self._write_totals(ctl, block, fmt, accent)
            elif isinstance(block, TextBlock):
                if block.key == "amount_in_words":
                    ctl.write_text(f"Amount in words: {block.text}", 9, "I")
                    ctl.skip(8)
                else:
                    ctl.write_section_title(block.title, accent)
                    ctl.write_text(block.text)
                    ctl.skip(8)
            elif isinstance(block, KeyValueBlock):
                ctl.write_section_title(block.title, accent)
                ctl.write_key_values([(c.label, card_text(c, fmt), c.emphasis) for c in block.items], 0.3)
        return ctl.render()

    def _write_parties(self, ctl, data, meta, org_name, accent):
        """Company block (left) beside the bill-to block (right)."""
        half = ctl.content_width / 2
        company = [line for line in (
            f"TRN: {meta.vat_number}" if meta.vat_number else None,
            meta.address, meta.phone, meta.email,
        ) if line]
        customer = data.get("customer") if isinstance(data.get("customer"), dict) else {}
        bill_to = [line for line in (
            customer.get("address"),
            f"TRN: {customer['trn']}" if customer.get("trn") else None,
            customer.get("email"), customer.get("phone"),
        ) if line]

        height = 28 + 12 * max(len(company), len(bill_to))
        ctl.ensure_space(height)
        top = ctl.cursor_y
        ctl.draw_text(ctl.content_left, top, half, 12, "From", 8, "B", accent, tag="party_label")
        ctl.draw_text(ctl.content_left, top + 12, half, 14, org_name, 10, "B", tag="company")
        for i, line in enumerate(company):
            ctl.draw_text(ctl.content_left, top + 28 + 12 * i, half, 12, line, 8, tag="company")
        right = ctl.content_left + half
        ctl.draw_text(right, top, half, 12, "Bill To", 8, "B", accent, tag="party_label")
        ctl.draw_text(right, top + 12, half, 14, customer.get("name") or "", 10, "B", tag="bill_to")
        for i, line in enumerate(bill_to):
            ctl.draw_text(right, top + 28 + 12 * i, half, 12, line, 8, tag="bill_to")
        ctl.cursor_y = top + height + 10

    def _write_totals(self, ctl, block, fmt, accent):
        """Right-aligned label/value lines under the line items."""
        value_w = 110.0
        label_w = 120.0
        x = ctl.content_left + ctl.content_width - value_w - label_w
        for card in block.items:
            ctl.ensure_space(ctl.LINE_HEIGHT)
            style = "B" if card.emphasis else ""
            color = accent if card.emphasis else ctl.palette.text
            ctl.draw_text(x, ctl.cursor_y, label_w, ctl.LINE_HEIGHT, card.label, 10, style, color, "R", tag="totals")
            ctl.draw_text(x + label_w, ctl.cursor_y, value_w, ctl.LINE_HEIGHT, card_text(card, fmt), 10, style,
                          color, "R", tag="totals")
            ctl.cursor_y += ctl.LINE_HEIGHT
        ctl.skip(8)
