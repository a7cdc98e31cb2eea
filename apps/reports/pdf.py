"""
PDF export of a property's transactions.

The report has a title, the generation date and one table row per
transaction of the property (every status), paginated onto as many A4
pages as needed.

Text is drawn with the Base-14 Helvetica fonts, which only carry Latin-1
glyphs. Characters outside Latin-1 (``€``, emoji, other scripts) are
printed as ``?`` by ``printable``.
"""

import logging
import re

import fitz  # PyMuPDF
from django.utils import timezone

from apps.ledger.formatters import format_date, format_signed_currency
from apps.ledger.models import TransactionType


logger = logging.getLogger(__name__)


PAGE_WIDTH, PAGE_HEIGHT = fitz.paper_size('a4')
MARGIN = 40
ROW_HEIGHT = 16
CELL_PADDING = 4
FONT_SIZE = 8

HEADER_FILL = (0, 156 / 255, 107 / 255)  # Brand green
ROW_STRIPE_FILL = (0.96, 0.96, 0.96)
WHITE = (1, 1, 1)
BLACK = (0, 0, 0)

# (title, width in points)
COLUMNS = [
    ('Data', 60),
    ('Descrição', 170),
    ('Categoria', 75),
    ('Pagador', 60),
    ('Status', 55),
    ('Valor', 95),
]
HEADERS = [title for title, _ in COLUMNS]


def report_rows(transactions):
    """
    Table rows of the report, one per transaction, in the given order.

    Each row is (date, description with ``(i/N)`` for installments,
    category label, payer, status label, signed amount).
    """
    rows = []
    for t in transactions:
        if t.type not in TransactionType.values:
            raise ValueError(f"Unhandled transaction type: {t.type!r}")
        signed = format_signed_currency(t.amount, is_revenue=t.type == TransactionType.REVENUE)

        rows.append((
            format_date(t.date),
            t.get_display_description(),
            t.get_category_display(),
            t.payer,
            t.get_status_display(),
            signed,
        ))
    return rows


def report_filename(prop, now=None):
    """``relatorio_<name>_<epoch ms>.pdf`` with the name lowercased and underscored."""
    now = now or timezone.now()
    slug = re.sub(r'\s+', '_', prop.name).lower()
    return f"relatorio_{slug}_{int(now.timestamp() * 1000)}.pdf"


def printable(text):
    """Replace every character the report fonts cannot draw with ``?``."""
    return str(text).encode('latin-1', errors='replace').decode('latin-1')


def _fit(text, width, fontname='helv'):
    """Truncate ``text`` with an ellipsis so it fits ``width`` points."""
    limit = width - 2 * CELL_PADDING
    if fitz.get_text_length(text, fontname=fontname, fontsize=FONT_SIZE) <= limit:
        return text
    while text and fitz.get_text_length(text + '...', fontname=fontname, fontsize=FONT_SIZE) > limit:
        text = text[:-1]
    return text + '...'


def _draw_row(page, y, cells, fontname='helv', fill=None, color=BLACK):
    x = MARGIN
    if fill is not None:
        table_width = sum(width for _, width in COLUMNS)
        page.draw_rect(fitz.Rect(x, y, x + table_width, y + ROW_HEIGHT), color=None, fill=fill)

    baseline = y + ROW_HEIGHT - 5
    for text, (_, width) in zip(cells, COLUMNS):
        page.insert_text(
            (x + CELL_PADDING, baseline),
            _fit(printable(text), width, fontname),
            fontname=fontname,
            fontsize=FONT_SIZE,
            color=color,
        )
        x += width


def build_property_report(prop, transactions, *, generated_at=None):
    """
    Render the financial report of one property.

    Args:
        prop (Property): The property; its name goes in the title.
        transactions (iterable): The property's transactions, all statuses.
        generated_at (datetime, optional): Defaults to now.

    Returns:
        bytes: The PDF document.
    """
    generated_at = generated_at or timezone.now()
    rows = report_rows(transactions)

    doc = fitz.open()
    try:
        page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        page.insert_text(
            (MARGIN, MARGIN + 16),
            printable(f"Relatório Financeiro - {prop.name}"),
            fontname='hebo',
            fontsize=18,
        )
        page.insert_text(
            (MARGIN, MARGIN + 34),
            f"Gerado em: {format_date(timezone.localdate(generated_at))}",
            fontname='helv',
            fontsize=10,
        )

        y = MARGIN + 46
        _draw_row(page, y, HEADERS, fontname='hebo', fill=HEADER_FILL, color=WHITE)
        y += ROW_HEIGHT

        for index, row in enumerate(rows):
            if y + ROW_HEIGHT > PAGE_HEIGHT - MARGIN:
                page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
                y = MARGIN
                _draw_row(page, y, HEADERS, fontname='hebo', fill=HEADER_FILL, color=WHITE)
                y += ROW_HEIGHT

            fill = ROW_STRIPE_FILL if index % 2 else None
            _draw_row(page, y, row, fill=fill)
            y += ROW_HEIGHT

        logger.info(
            "Built report for property %s: %d rows, %d pages",
            prop.id, len(rows), doc.page_count
        )
        return doc.tobytes()
    finally:
        doc.close()
