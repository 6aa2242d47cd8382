"""
PDF rendering for dispense receipts and the inventory report.

Renderers are handed resolved data and return the document bytes. They never
read the store, so a failed export cannot affect stock.
"""

import logging
import os
from io import BytesIO
from xml.sax.saxutils import escape
from typing import Iterable, Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase.pdfmetrics import registerFontFamily
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from core.config import settings
from core.errors import ExportError
from core.i18n import item_display_name, label
from db.inventory.item import InventoryItem
from db.inventory.transaction import InventoryTransaction
from schemas.reports import Receipt

logger = logging.getLogger(__name__)


def _font_names():
    """(regular, bold) font names. Arabic labels need PDF_FONT_PATH set to a TTF that has the glyphs."""
    path = settings.pdf_font_path
    if not path:
        return "Helvetica", "Helvetica-Bold"
    name = os.path.splitext(os.path.basename(path))[0]
    if name not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(name, path))
        # <b> markup resolves through the family
        registerFontFamily(name, normal=name, bold=name, italic=name, boldItalic=name)
    return name, name


def _styles(regular: str):
    styles = getSampleStyleSheet()
    for key in ("Title", "Normal", "Heading2"):
        styles[key].fontName = regular
    return styles


def _table_style(regular: str, bold: str) -> TableStyle:
    return TableStyle([
        ("FONTNAME", (0, 0), (-1, 0), bold),
        ("FONTNAME", (0, 1), (-1, -1), regular),
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ])


def _fmt_qty(q: float) -> str:
    return f"{q:g}"


def _build(story) -> bytes:
    buf = BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4)
    doc.build(story)
    return buf.getvalue()


def render_receipt(receipt: Receipt, language: str) -> bytes:
    try:
        regular, bold = _font_names()
        styles = _styles(regular)
        story = []

        if settings.establishment_name:
            story.append(Paragraph(f"<b>{escape(settings.establishment_name)}</b>", styles["Normal"]))
        title_key = "receipt_title" if receipt.type == "out" else "receive_title"
        story.append(Paragraph(label(title_key, language), styles["Title"]))
        story.append(Spacer(1, 10))

        story.append(Paragraph(f"{label('transaction_id', language)}: {receipt.id}", styles["Normal"]))
        story.append(Paragraph(f"{label('date', language)}: {receipt.date:%Y-%m-%d %H:%M}", styles["Normal"]))
        story.append(Paragraph(f"{label('department', language)}: {escape(receipt.department)}", styles["Normal"]))
        if receipt.notes:
            story.append(Paragraph(f"{label('notes', language)}: {escape(receipt.notes)}", styles["Normal"]))
        story.append(Spacer(1, 20))

        data = [[label("item_name", language), label("quantity", language), label("unit", language), label("notes", language)]]
        for line in receipt.lines:
            name = item_display_name(line.name or "", line.name_ar or "", language) or line.item_id
            data.append([name, _fmt_qty(line.quantity), line.unit or "", line.notes or ""])

        table = Table(data, repeatRows=1)
        table.setStyle(_table_style(regular, bold))
        story.append(table)
        return _build(story)
    except Exception as e:
        logger.exception("Receipt export failed for transaction %s", receipt.id)
        raise ExportError("Failed to generate receipt") from e


def render_inventory_report(
    items: Sequence[InventoryItem],
    transactions: Iterable[InventoryTransaction],
    language: str,
) -> bytes:
    try:
        regular, bold = _font_names()
        styles = _styles(regular)
        story = [Paragraph(label("report_title", language), styles["Title"]), Spacer(1, 10)]

        story.append(Paragraph(label("inventory_summary", language), styles["Heading2"]))
        data = [[label("item_name", language), label("quantity", language), label("unit", language)]]
        for it in items:
            data.append([item_display_name(it.name, it.name_ar, language), _fmt_qty(float(it.quantity or 0)), it.unit or ""])
        table = Table(data, repeatRows=1)
        table.setStyle(_table_style(regular, bold))
        story.append(table)
        story.append(Spacer(1, 20))

        low = sum(1 for it in items if it.is_low_stock)
        total_out = sum(1 for tx in transactions if tx.type == "out")
        story.append(Paragraph(label("transactions_summary", language), styles["Heading2"]))
        story.append(Paragraph(f"{label('total_transactions', language)}: {total_out}", styles["Normal"]))
        story.append(Paragraph(f"{label('low_stock', language)}: {low}", styles["Normal"]))
        return _build(story)
    except Exception as e:
        logger.exception("Inventory report export failed")
        raise ExportError("Failed to generate inventory report") from e
