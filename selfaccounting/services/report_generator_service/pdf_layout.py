"""
PDF Layout - pagination controller and page buffers for the print format.

Layout runs in two phases. The controller lays content out into
``PageBuffer`` objects (lists of draw operations, all coordinates in points
from the top-left corner of an A4 page). ``finalize()`` then backfills the
"Page X of Y" footers, which need the final page count, and replays the
operations onto an fpdf2 document.

Every ``write_*`` method checks for overflow BEFORE drawing: if the element
does not fit above the bottom margin, a new page is started (repainting the
page header and, inside a table, the table header) and the element is drawn
there. Rows are never split across pages.

Part of the report_generator_service package.
"""

import logging
import re as _re
from dataclasses import dataclass, field
from io import BytesIO
from typing import Callable, List, Optional, Sequence, Tuple

from fpdf import FPDF

from selfaccounting.services.brand_service import brand_color, hex_to_rgb

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

A4_PORTRAIT = (595.28, 841.89)
CELL_PAD = 4.0
FONT = "Helvetica"

_ALIGN = {"left": "L", "center": "C", "right": "R", "L": "L", "C": "C", "R": "R"}

# Regex to strip emoji characters (Helvetica lacks emoji glyphs)
_EMOJI_RE = _re.compile(
    "["
    "\U0001F300-\U0001F9FF"  # Misc Symbols, Emoticons, Supplemental Symbols
    "\U00002702-\U000027B0"  # Dingbats
    "\U0000FE00-\U0000FE0F"  # Variation Selectors
    "\U0000200D"             # Zero Width Joiner
    "]+",
)

_PDF_REPLACEMENTS = {
    "\u2013": "-",     # en-dash
    "\u2014": "--",    # em-dash
    "\u2018": "'",     # left single quote
    "\u2019": "'",     # right single quote
    "\u201c": '"',     # left double quote
    "\u201d": '"',     # right double quote
    "\u2026": "...",   # ellipsis
    "\u2022": "*",     # bullet
    "\u00a0": " ",     # non-breaking space
    "\u202f": " ",     # narrow no-break space
    "\u2212": "-",     # minus sign
    "\u20ac": "EUR ",  # euro sign (not in Latin-1)
    "\u20b9": "Rs ",   # rupee sign
}


def _sanitize_for_pdf(text: str) -> str:
    """Replace characters unsupported by the core Helvetica font (Latin-1) with ASCII equivalents."""
    text = _EMOJI_RE.sub("", text)
    for char, replacement in _PDF_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    # Fallback: replace any remaining non-Latin-1 chars
    return text.encode("latin-1", errors="replace").decode("latin-1")


def _truncate_to_width(pdf, text: str, max_width: float) -> str:
    """Truncate text with '...' suffix if it exceeds the given width (points)."""
    if pdf.get_string_width(text) <= max_width:
        return text
    ellipsis = "..."
    ew = pdf.get_string_width(ellipsis)
    for i in range(len(text), 0, -1):
        if pdf.get_string_width(text[:i]) + ew <= max_width:
            return text[:i] + ellipsis
    return ellipsis


@dataclass
class Palette:
    primary: RGB
    header_bg: RGB
    border: RGB
    row_tint: RGB
    total_fill: RGB
    text: RGB
    muted: RGB

    @classmethod
    def from_brand(cls, accent: Optional[str] = None) -> "Palette":
        return cls(
            primary=hex_to_rgb(accent) if accent else brand_color("primary"),
            header_bg=brand_color("headerBackground"),
            border=brand_color("border"),
            row_tint=brand_color("rowTint"),
            total_fill=brand_color("totalFill"),
            text=brand_color("text"),
            muted=brand_color("muted"),
        )


@dataclass
class DrawOp:
    kind: str  # rect | text | line | image
    x: float
    y: float
    w: float = 0.0
    h: float = 0.0
    text: str = ""
    style: str = ""
    size: float = 9.0
    color: RGB = (31, 41, 55)
    fill: Optional[RGB] = None
    stroke: Optional[RGB] = None
    align: str = "L"
    x2: float = 0.0
    y2: float = 0.0
    line_width: float = 0.5
    image: Optional[bytes] = None
    tag: str = ""


@dataclass
class PageBuffer:
    """Draw operations recorded for one page, replayed at finalize time."""

    index: int
    width: float
    height: float
    cursor_y: float = 0.0
    ops: List[DrawOp] = field(default_factory=list)
    footer_painted: bool = False

    @property
    def landscape(self) -> bool:
        return self.width > self.height

    def add_rect(self, x, y, w, h, fill=None, stroke=None, tag=""):
        self.ops.append(DrawOp("rect", x, y, w, h, fill=fill, stroke=stroke, tag=tag))

    def add_text(self, x, y, w, h, text, size=9.0, style="", color=(31, 41, 55), align="L", tag="text"):
        self.ops.append(DrawOp(
            "text", x, y, w, h, text=_sanitize_for_pdf(str(text)),
            style=style, size=size, color=color, align=_ALIGN.get(align, "L"), tag=tag,
        ))

    def add_line(self, x1, y1, x2, y2, color=(208, 215, 222), width=0.5, tag="line"):
        self.ops.append(DrawOp("line", x1, y1, x2=x2, y2=y2, stroke=color, line_width=width, tag=tag))

    def add_image(self, data: bytes, x, y, w, h, placeholder="", tag="logo"):
        self.ops.append(DrawOp("image", x, y, w, h, text=_sanitize_for_pdf(placeholder), image=data, tag=tag))

    def tagged(self, tag: str) -> List[DrawOp]:
        return [op for op in self.ops if op.tag == tag]

    def texts(self) -> List[str]:
        return [op.text for op in self.ops if op.kind == "text"]


@dataclass
class FooterText:
    disclaimer: str = ""
    generated_line: str = ""


@dataclass
class _TableContext:
    labels: List[str]
    widths: List[float]
    align: List[str]


class PaginationController:
    """Cursor-based layout over a sequence of A4 page buffers."""

    HEADER_TOP = 30.0
    HEADER_HEIGHT = 120.0
    HEADER_GAP = 15.0
    TABLE_HEADER_HEIGHT = 25.0
    ROW_HEIGHT = 20.0
    SECTION_TITLE_HEIGHT = 22.0
    LINE_HEIGHT = 16.0
    NOTICE_HEIGHT = 18.0
    CARD_HEIGHT = 44.0
    CARD_GAP = 8.0

    def __init__(
        self,
        header_painter: Optional[Callable[["PaginationController"], None]] = None,
        landscape: bool = False,
        margin: float = 50.0,
        bottom_margin: float = 80.0,
        header_height: Optional[float] = None,
        palette: Optional[Palette] = None,
    ):
        width, height = A4_PORTRAIT
        if landscape:
            width, height = height, width
        self.page_width = width
        self.page_height = height
        self.margin = margin
        self.bottom_margin = bottom_margin
        self.header_painter = header_painter
        if header_height is None:
            header_height = self.HEADER_HEIGHT if header_painter else 0.0
        self.header_height = header_height
        self.palette = palette or Palette.from_brand()
        self.pages: List[PageBuffer] = []
        self.cursor_y = 0.0
        self._table: Optional[_TableContext] = None
        self._measure = FPDF(unit="pt", format="A4")
        self.new_page()

    # ----------------------------------------------------------------
    # Geometry
    # ----------------------------------------------------------------

    @property
    def page(self) -> PageBuffer:
        return self.pages[-1]

    @property
    def content_left(self) -> float:
        return self.margin

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def content_top(self) -> float:
        if not self.header_height:
            return self.HEADER_TOP
        return self.HEADER_TOP + self.header_height + self.HEADER_GAP

    @property
    def page_limit(self) -> float:
        return self.page_height - self.bottom_margin

    def fits(self, height: float) -> bool:
        return self.cursor_y + height <= self.page_limit

    def rows_per_page(self) -> int:
        """Body rows that fit on a page below a repeated table header."""
        usable = self.page_limit - (self.content_top + self.TABLE_HEADER_HEIGHT)
        return max(1, int(usable // self.ROW_HEIGHT))

    # ----------------------------------------------------------------
    # Text measurement
    # ----------------------------------------------------------------

    def string_width(self, text: str, size: float = 9.0, style: str = "") -> float:
        self._measure.set_font(FONT, style, size)
        return self._measure.get_string_width(_sanitize_for_pdf(str(text)))

    def fit_text(self, text, width: float, size: float = 9.0, style: str = "") -> str:
        """Sanitize and truncate text to a cell width (padding included)."""
        text = _sanitize_for_pdf("" if text is None else str(text))
        self._measure.set_font(FONT, style, size)
        return _truncate_to_width(self._measure, text, width - 2 * CELL_PAD)

    def wrap_text(self, text: str, width: float, size: float = 9.0, style: str = "") -> List[str]:
        """Greedy word wrap; explicit newlines start new lines."""
        self._measure.set_font(FONT, style, size)
        limit = width - 2 * CELL_PAD
        lines = []
        for paragraph in _sanitize_for_pdf(text or "").split("\n"):
            line = ""
            for word in paragraph.split():
                candidate = f"{line} {word}" if line else word
                if not line or self._measure.get_string_width(candidate) <= limit:
                    line = candidate
                else:
                    lines.append(line)
                    line = word
            lines.append(line)
        return lines or [""]

    # ----------------------------------------------------------------
    # Absolute drawing (used by header and footer painters)
    # ----------------------------------------------------------------

    def draw_text(self, x, y, w, h, text, size=9.0, style="", color=None, align="L", tag="text"):
        fitted = self.fit_text(text, w, size, style) if w else _sanitize_for_pdf(str(text))
        self.page.add_text(x, y, w, h, fitted, size, style, color or self.palette.text, align, tag)

    def draw_rect(self, x, y, w, h, fill=None, stroke=None, tag=""):
        self.page.add_rect(x, y, w, h, fill, stroke, tag)

    def draw_line(self, x1, y1, x2, y2, color=None, width=0.5, tag="line"):
        self.page.add_line(x1, y1, x2, y2, color or self.palette.border, width, tag)

    def draw_image(self, data: bytes, x, y, w, h, placeholder="", tag="logo"):
        self.page.add_image(data, x, y, w, h, placeholder, tag)

    # ----------------------------------------------------------------
    # Pages
    # ----------------------------------------------------------------

    def new_page(self):
        """Start a page: paint the page header and, mid-table, the table header."""
        if self.pages:
            self.page.cursor_y = self.cursor_y
        self.pages.append(PageBuffer(len(self.pages), self.page_width, self.page_height))
        self.cursor_y = self.HEADER_TOP
        if self.header_painter is not None:
            self.header_painter(self)
        self.cursor_y = self.content_top
        if self._table is not None:
            self._draw_table_header()

    def ensure_space(self, height: float):
        if not self.fits(height):
            self.new_page()

    def skip(self, height: float):
        """Vertical gap; the next write starts a new page if the gap overflowed."""
        self.cursor_y += height

    # ----------------------------------------------------------------
    # Flow content
    # ----------------------------------------------------------------

    def write_section_title(self, text: str, accent: Optional[RGB] = None):
        """Section heading kept together with at least a table header and one row."""
        self.ensure_space(self.SECTION_TITLE_HEIGHT + self.TABLE_HEADER_HEIGHT + self.ROW_HEIGHT)
        color = accent or self.palette.primary
        self.draw_text(self.content_left, self.cursor_y, self.content_width, 16, text,
                       12, "B", color, tag="section")
        self.draw_line(self.content_left, self.cursor_y + 17, self.content_left + self.content_width,
                       self.cursor_y + 17, color, 0.8)
        self.cursor_y += self.SECTION_TITLE_HEIGHT

    def write_notice(self, text: str):
        self.ensure_space(self.NOTICE_HEIGHT)
        self.draw_text(self.content_left, self.cursor_y, self.content_width, self.NOTICE_HEIGHT,
                       text, 9, "I", self.palette.muted, tag="notice")
        self.cursor_y += self.NOTICE_HEIGHT

    def write_text(self, text: str, size: float = 9.0, style: str = "", color: Optional[RGB] = None,
                   x: Optional[float] = None, width: Optional[float] = None):
        x = self.content_left if x is None else x
        width = self.content_width if width is None else width
        line_height = size + 4
        for line in self.wrap_text(text, width, size, style):
            self.ensure_space(line_height)
            self.draw_text(x, self.cursor_y, width, line_height, line, size, style, color, tag="paragraph")
            self.cursor_y += line_height

    def write_key_values(self, items: Sequence[Tuple[str, str, bool]], label_ratio: float = 0.45):
        """Label/value lines; emphasised items print the value in bold accent."""
        label_w = self.content_width * label_ratio
        value_w = self.content_width - label_w
        for label, value, emphasis in items:
            self.ensure_space(self.LINE_HEIGHT)
            self.draw_text(self.content_left, self.cursor_y, label_w, self.LINE_HEIGHT, label,
                           10, "", self.palette.muted, tag="kv_label")
            self.draw_text(self.content_left + label_w, self.cursor_y, value_w, self.LINE_HEIGHT, value,
                           10, "B" if emphasis else "", self.palette.primary if emphasis else self.palette.text,
                           tag="kv_value")
            self.cursor_y += self.LINE_HEIGHT

    def write_cards(self, cards: Sequence[Tuple[str, str, bool]], per_row: int = 3,
                    accent: Optional[RGB] = None):
        """Summary cards in a grid; each grid row is placed whole."""
        if not cards:
            return
        per_row = max(1, per_row)
        card_w = (self.content_width - self.CARD_GAP * (per_row - 1)) / per_row
        color = accent or self.palette.primary
        for start in range(0, len(cards), per_row):
            self.ensure_space(self.CARD_HEIGHT)
            for offset, (label, value, emphasis) in enumerate(cards[start:start + per_row]):
                x = self.content_left + offset * (card_w + self.CARD_GAP)
                self.draw_rect(x, self.cursor_y, card_w, self.CARD_HEIGHT,
                               fill=self.palette.header_bg, stroke=self.palette.border, tag="card")
                if emphasis:
                    self.draw_rect(x, self.cursor_y, 3, self.CARD_HEIGHT, fill=color, tag="card_accent")
                self.draw_text(x + 4, self.cursor_y + 6, card_w - 8, 12, label, 8, "",
                               self.palette.muted, tag="card_label")
                self.draw_text(x + 4, self.cursor_y + 20, card_w - 8, 16, value, 11, "B",
                               color if emphasis else self.palette.text, tag="card_value")
            self.cursor_y += self.CARD_HEIGHT + self.CARD_GAP

    # ----------------------------------------------------------------
    # Tables
    # ----------------------------------------------------------------

    def write_table_header(self, labels: Sequence[str], widths: Sequence[float], align: Sequence[str]):
        """Begin a table; its header row repeats at the top of every continuation page."""
        self._table = None
        self.ensure_space(self.TABLE_HEADER_HEIGHT + self.ROW_HEIGHT)
        self._table = _TableContext(list(labels), list(widths), list(align))
        self._draw_table_header()

    def _draw_table_header(self):
        table = self._table
        x = self.content_left
        self.draw_rect(x, self.cursor_y, sum(table.widths), self.TABLE_HEADER_HEIGHT,
                       fill=self.palette.header_bg, stroke=self.palette.border, tag="table_header")
        for label, width, align in zip(table.labels, table.widths, table.align):
            self.draw_text(x, self.cursor_y, width, self.TABLE_HEADER_HEIGHT, label, 10, "B",
                           self.palette.primary, align, tag="th")
            x += width
        self.cursor_y += self.TABLE_HEADER_HEIGHT

    def _draw_row(self, values: Sequence[str], fill: Optional[RGB], style: str, color: RGB, tag: str):
        table = self._table
        x = self.content_left
        self.draw_rect(x, self.cursor_y, sum(table.widths), self.ROW_HEIGHT,
                       fill=fill, stroke=self.palette.border, tag=tag)
        for value, width, align in zip(values, table.widths, table.align):
            self.draw_text(x, self.cursor_y, width, self.ROW_HEIGHT, value, 9, style, color, align, tag="cell")
            x += width
        self.cursor_y += self.ROW_HEIGHT

    def write_row(self, values: Sequence[str], row_index: int):
        """
        Draw one body row

        ``row_index`` is the row's position in the whole table, so the zebra
        tint stays continuous across page breaks.
        """
        if self.cursor_y + self.ROW_HEIGHT > self.page_limit:
            self.new_page()
        fill = self.palette.row_tint if row_index % 2 == 0 else None
        self._draw_row(values, fill, "", self.palette.text, "row")

    def write_totals_row(self, values: Sequence[str]):
        if self.cursor_y + self.ROW_HEIGHT > self.page_limit:
            self.new_page()
        self._draw_row(values, self.palette.total_fill, "B", self.palette.primary, "total")

    def end_table(self, spacing: float = 10.0):
        self._table = None
        self.skip(spacing)

    # ----------------------------------------------------------------
    # Output
    # ----------------------------------------------------------------

    def render(self) -> List[PageBuffer]:
        self.page.cursor_y = self.cursor_y
        return self.pages


def paint_footer(page: PageBuffer, page_number: int, total_pages: int, footer: FooterText,
                 margin: float = 50.0, palette: Optional[Palette] = None):
    """Footer at a fixed distance from the page bottom, painted once per page."""
    if page.footer_painted:
        return
    palette = palette or Palette.from_brand()
    width = page.width - 2 * margin
    y = page.height - 35
    page.add_line(margin, y - 8, margin + width, y - 8, palette.border, 0.5, tag="footer")
    if footer.disclaimer:
        page.add_text(margin, y - 4, width * 0.7, 10, footer.disclaimer, 7, "I", palette.muted, "L", tag="footer")
    page.add_text(margin + width * 0.7, y - 4, width * 0.3, 10, f"Page {page_number} of {total_pages}",
                  8, "", palette.muted, "R", tag="footer")
    if footer.generated_line:
        page.add_text(margin, y + 8, width, 10, footer.generated_line, 7, "", palette.muted, "C", tag="footer")
    page.footer_painted = True


def _replay(pdf: FPDF, op: DrawOp):
    if op.kind == "rect":
        if op.fill is not None:
            pdf.set_fill_color(*op.fill)
        if op.stroke is not None:
            pdf.set_draw_color(*op.stroke)
            pdf.set_line_width(op.line_width)
        style = ("D" if op.stroke is not None else "") + ("F" if op.fill is not None else "")
        if style:
            pdf.rect(op.x, op.y, op.w, op.h, style)
    elif op.kind == "text":
        pdf.set_font(FONT, op.style, op.size)
        pdf.set_text_color(*op.color)
        pdf.set_xy(op.x, op.y)
        pdf.cell(op.w, op.h, op.text, align=op.align)
    elif op.kind == "line":
        pdf.set_draw_color(*op.stroke)
        pdf.set_line_width(op.line_width)
        pdf.line(op.x, op.y, op.x2, op.y2)
    elif op.kind == "image":
        try:
            pdf.image(BytesIO(op.image), x=op.x, y=op.y, w=op.w, h=op.h)
        except Exception as e:
            logger.warning(f"Failed to embed logo, using text placeholder: {e}")
            if op.text:
                pdf.set_font(FONT, "B", 12)
                pdf.set_text_color(30, 58, 138)
                pdf.set_xy(op.x, op.y)
                pdf.cell(op.w, 14, op.text)


def finalize(pages: Sequence[PageBuffer], footer: Optional[FooterText] = None,
             margin: float = 50.0, palette: Optional[Palette] = None) -> bytes:
    """
    Backfill footers and replay page buffers onto an fpdf2 document

    Args:
        pages: Buffers from the layout phase, in order
        footer: Footer text; "Page X of Y" is always added
        margin: Horizontal page margin in points

    Returns:
        PDF file bytes
    """
    total = len(pages)
    for number, page in enumerate(pages, start=1):
        paint_footer(page, number, total, footer or FooterText(), margin, palette)

    pdf = FPDF(unit="pt", format="A4")
    pdf.set_auto_page_break(False)
    pdf.set_margins(0, 0, 0)
    pdf.c_margin = CELL_PAD
    for page in pages:
        pdf.add_page(orientation="L" if page.landscape else "P")
        for op in page.ops:
            _replay(pdf, op)

    buffer = BytesIO()
    pdf.output(buffer)
    return buffer.getvalue()
