"""
Report Generator Service

Split into focused modules:
- field_semantics: column name -> kind/alignment/summable lookup
- descriptors: per-type titles, orientation, accent colours and cards
- column_planner: column selection and widths
- totals: Decimal totals, sign convention, breakdown aggregates
- blocks / renderers: format-neutral document model and per-type strategies
- pdf_layout / pdf_blocks / pdf_generator: paginated print documents with fpdf2
- xlsx_builder: workbooks with openpyxl
- csv_builder: delimited text
- dispatcher: generate_report() entry point
"""

from selfaccounting.services.report_generator_service.dispatcher import (  # noqa: F401
    content_type_for,
    generate_report,
    normalize_format,
    report_filename,
)
from selfaccounting.services.report_generator_service.csv_builder import generate_csv  # noqa: F401
from selfaccounting.services.report_generator_service.pdf_generator import (  # noqa: F401
    generate_pdf,
    render_pdf_pages,
)
from selfaccounting.services.report_generator_service.xlsx_builder import generate_xlsx  # noqa: F401
