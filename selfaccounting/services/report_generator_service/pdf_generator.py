"""
PDF Generator - print documents with fpdf2.

Lays report blocks out with the PaginationController (phase one,
``render_pdf_pages``) and then backfills footers and writes the PDF
(phase two, ``finalize``).

Part of the report_generator_service package.
"""

import logging
from datetime import datetime, timezone
from typing import List

from selfaccounting.config import Settings, settings as default_settings
from selfaccounting.currency_utils import describe_filters, format_datetime, format_period
from selfaccounting.schemas.report import ReportData
from selfaccounting.services.brand_service import get_brand
from selfaccounting.services.report_generator_service.descriptors import DEFAULT_ACCENT
from selfaccounting.services.report_generator_service.formatting import ValueFormatter
from selfaccounting.services.report_generator_service.pdf_blocks import write_block
from selfaccounting.services.report_generator_service.pdf_layout import (
    FooterText,
    PageBuffer,
    PaginationController,
    Palette,
    finalize,
)
from selfaccounting.services.report_generator_service.renderers import build_blocks, get_renderer

logger = logging.getLogger(__name__)


def generated_at(report: ReportData) -> datetime:
    return report.metadata.generated_at or datetime.now(timezone.utc)


def identity_lines(report: ReportData) -> List[str]:
    """Organization contact lines under the name, in header order."""
    meta = report.metadata
    lines = []
    if meta.vat_number:
        lines.append(f"TRN/VAT: {meta.vat_number}")
    if meta.address:
        lines.append(f"Address: {meta.address}")
    if meta.phone:
        lines.append(f"Phone: {meta.phone}")
    if meta.email:
        lines.append(f"Email: {meta.email}")
    return lines


def report_info_lines(report: ReportData, fmt: ValueFormatter) -> List[str]:
    """Right-hand header lines; absent metadata omits its line."""
    meta = report.metadata
    lines = []
    period = meta.report_period
    if period and (period.start_date or period.end_date):
        lines.append(f"Period: {format_period(period.start_date, period.end_date)}")
    if meta.organization_id:
        lines.append(f"Org ID: {meta.organization_id[:8]}")
    lines.append(f"Currency: {fmt.currency}")
    lines.append(f"Generated: {format_datetime(generated_at(report))}")
    generated_by = meta.generated_by_name or meta.generated_by
    if generated_by:
        lines.append(f"Generated by: {generated_by}")
    filters = describe_filters(meta.filters)
    if filters:
        lines.append(f"Filters: {filters}")
    return lines


def build_header_painter(report: ReportData, logo, fmt: ValueFormatter, title: str, config: Settings):
    """Page header: logo and organization identity left, report identity right."""
    brand = get_brand()
    org_name = report.metadata.organization_name or config.default_organization_name
    left_lines = identity_lines(report)
    right_lines = report_info_lines(report, fmt)

    def paint(ctl: PaginationController):
        x, top, w, h = ctl.margin, ctl.HEADER_TOP, ctl.content_width, ctl.header_height
        palette = ctl.palette
        ctl.draw_rect(x, top, w, h, fill=palette.header_bg, stroke=palette.border, tag="header")

        if logo is not None:
            lw = min(80.0, 40.0 * logo.aspect_ratio)
            ctl.draw_image(logo.data, x + 10, top + 10, lw, lw / logo.aspect_ratio,
                           placeholder=brand.get("logoText", config.app_logo_text))
        else:
            ctl.draw_text(x + 10, top + 10, 85, 16, brand.get("logoText", config.app_logo_text),
                          10, "B", palette.primary, tag="logo_text")

        left_x = x + 100
        left_w = w * 0.55 - 100
        ctl.draw_text(left_x, top + 8, left_w, 22, org_name, 18, "B", palette.primary, tag="org_name")
        y = top + 34
        for line in left_lines:
            ctl.draw_text(left_x, y, left_w, 11, line, 8, "", palette.text, tag="identity")
            y += 11

        right_x = x + w * 0.55
        right_w = w * 0.45 - 10
        ctl.draw_text(right_x, top + 8, right_w, 18, title, 13, "B", palette.primary, "R", tag="report_title")
        y = top + 30
        for line in right_lines:
            ctl.draw_text(right_x, y, right_w, 11, line, 8, "", palette.text, "R", tag="report_info")
            y += 11

    return paint


def footer_for(report: ReportData, config: Settings) -> FooterText:
    brand = get_brand()
    return FooterText(
        disclaimer=brand.get("disclaimer", ""),
        generated_line=f"Generated by {config.app_name} on {format_datetime(generated_at(report))}",
    )


def render_pdf_pages(report, logo=None, config: Settings = None) -> List[PageBuffer]:
    """
    Lay a report out into page buffers (phase one)

    Args:
        report: ReportData or plain mapping
        logo: ResolvedLogo, or None for the text placeholder
        config: Settings override

    Returns:
        Page buffers; footers are not painted yet
    """
    config = config or default_settings
    report = ReportData.coerce(report)
    strategy = get_renderer(report)
    fmt = ValueFormatter.for_report(report, config.default_currency)

    custom = strategy.render_pdf_pages(report, fmt, logo, config)
    if custom is not None:
        return custom

    descriptor = strategy.descriptor
    accent = descriptor.accent if descriptor.accent != DEFAULT_ACCENT else None
    ctl = PaginationController(
        build_header_painter(report, logo, fmt, descriptor.title, config),
        landscape=descriptor.landscape,
        margin=config.pdf_page_margin,
        bottom_margin=config.pdf_bottom_margin,
        palette=Palette.from_brand(accent),
    )
    for block in build_blocks(report, fmt, strategy):
        write_block(ctl, block, fmt, report.type)
    return ctl.render()


def generate_pdf(report, logo=None, config: Settings = None) -> bytes:
    """
    Generate the print document for a report

    Returns:
        PDF bytes
    """
    config = config or default_settings
    report = ReportData.coerce(report)
    pages = render_pdf_pages(report, logo, config)
    pdf_bytes = finalize(pages, footer_for(report, config), config.pdf_page_margin)
    logger.info(f"PDF generated for {report.type}: {len(pages)} page(s), {len(pdf_bytes)} bytes")
    return pdf_bytes

