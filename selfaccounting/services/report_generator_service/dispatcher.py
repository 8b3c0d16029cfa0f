"""
Report Dispatcher - the engine's entry point.

``generate_report(fmt, report_data)`` validates the payload, resolves the
logo for print documents (the only await), and hands off to the backend
for the requested format.

Part of the report_generator_service package.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Callable, Dict

from pydantic import ValidationError as PydanticValidationError

from selfaccounting.config import Settings, settings as default_settings
from selfaccounting.currency_utils import parse_date
from selfaccounting.exceptions import ReportRenderError, ValidationError
from selfaccounting.schemas.report import ReportData
from selfaccounting.services.logo_service import resolve_logo
from selfaccounting.services.report_generator_service.csv_builder import generate_csv
from selfaccounting.services.report_generator_service.pdf_generator import generate_pdf
from selfaccounting.services.report_generator_service.xlsx_builder import generate_xlsx

logger = logging.getLogger(__name__)

PRINT = "print"
SHEET = "sheet"
CSV = "csv"

FORMAT_ALIASES: Dict[str, str] = {
    "print": PRINT,
    "pdf": PRINT,
    "sheet": SHEET,
    "xlsx": SHEET,
    "excel": SHEET,
    "csv": CSV,
}

FILE_EXTENSIONS = {PRINT: "pdf", SHEET: "xlsx", CSV: "csv"}

CONTENT_TYPES = {
    PRINT: "application/pdf",
    SHEET: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    CSV: "text/csv; charset=utf-8",
}


def normalize_format(fmt: str) -> str:
    """Canonical format name for an alias; raises ValidationError when unknown."""
    canonical = FORMAT_ALIASES.get(str(fmt or "").strip().lower())
    if canonical is None:
        raise ValidationError(
            f"Unsupported report format '{fmt}'. Use one of: print, sheet, csv"
        )
    return canonical


def content_type_for(fmt: str) -> str:
    return CONTENT_TYPES[normalize_format(fmt)]


def report_filename(report, fmt: str) -> str:
    """
    Download filename for a generated report

    e.g. "trial_balance_2024-01-01_2024-12-31.xlsx"; reports without a
    period fall back to the generation date.
    """
    report = ReportData.coerce(report)
    extension = FILE_EXTENSIONS[normalize_format(fmt)]
    slug = re.sub(r"[^a-z0-9]+", "_", report.type).strip("_") or "report"
    period = report.metadata.report_period
    parts = []
    if period is not None:
        parts = [str(d)[:10] for d in (period.start_date, period.end_date) if d]
    if not parts:
        parts = [(parse_date(report.metadata.generated_at) or datetime.now(timezone.utc)).strftime("%Y-%m-%d")]
    return f"{slug}_{'_'.join(parts)}.{extension}"


def _validate(report_data) -> ReportData:
    try:
        return ReportData.coerce(report_data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid report data: {e.errors()[0].get('msg', str(e))}") from e


async def generate_report(fmt: str, report_data, config: Settings = None) -> bytes:
    """
    Render a report into the requested output format

    Args:
        fmt: 'print' | 'sheet' | 'csv' (or 'pdf' / 'xlsx')
        report_data: ReportData or a plain mapping
        config: Settings override

    Returns:
        Document bytes

    Raises:
        ValidationError: unknown format or malformed report data
        ReportRenderError: the backend failed while rendering
    """
    config = config or default_settings
    canonical = normalize_format(fmt)
    report = _validate(report_data)

    logo = None
    if canonical == PRINT:
        logo = await resolve_logo(report.metadata, config)

    builders: Dict[str, Callable[[], bytes]] = {
        PRINT: lambda: generate_pdf(report, logo, config),
        SHEET: lambda: generate_xlsx(report, config),
        CSV: lambda: generate_csv(report, config),
    }
    try:
        return builders[canonical]()
    except Exception as e:
        logger.error(f"Failed to render {report.type} as {canonical}: {e}", exc_info=True)
        raise ReportRenderError(
            f"Failed to render {report.type} report as {canonical}: {e}",
            report_type=report.type,
            fmt=canonical,
        ) from e
