"""PDF rendering of receipts and reports."""

import os
from datetime import datetime

import pytest
import reportlab
from reportlab.pdfbase import pdfmetrics

from core.errors import ExportError
from db.inventory.item import InventoryItem
from schemas.reports import Receipt, ReceiptLine
from services import export


def _receipt(**kw):
    return Receipt(
        id="tx-1",
        date=datetime(2024, 5, 1, 9, 0),
        department=kw.get("department", "Kitchen & Bar"),
        type=kw.get("type", "out"),
        notes=kw.get("notes", "<urgent>"),
        lines=[
            ReceiptLine(item_id="A", name="Rice", name_ar="أرز", quantity=4, unit="kg"),
            ReceiptLine(item_id="GONE", quantity=1),
        ],
    )


@pytest.mark.parametrize("language", ["en", "ar"])
def test_render_receipt_returns_pdf(language):
    pdf = export.render_receipt(_receipt(), language)
    assert pdf.startswith(b"%PDF")


def test_render_receive_voucher():
    assert export.render_receipt(_receipt(type="in"), "en").startswith(b"%PDF")


def test_render_inventory_report():
    items = [
        InventoryItem(id="A", name="Rice", name_ar="أرز", category="Dry", quantity=5, min_quantity=5,
                      last_updated=datetime(2024, 1, 1)),
    ]
    assert export.render_inventory_report(items, [], "en").startswith(b"%PDF")
    assert export.render_inventory_report([], [], "ar").startswith(b"%PDF")


def test_render_failure_becomes_export_error(monkeypatch, caplog):
    def _broken(story):
        raise OSError("disk full")

    monkeypatch.setattr(export, "_build", _broken)
    with pytest.raises(ExportError) as exc:
        export.render_receipt(_receipt(), "en")
    assert "disk full" not in str(exc.value)
    assert "Receipt export failed" in caplog.text


def test_default_font_is_builtin(monkeypatch):
    monkeypatch.setattr(export.settings, "pdf_font_path", "")
    assert export._font_names() == ("Helvetica", "Helvetica-Bold")


def test_configured_ttf_font_is_embedded(monkeypatch):
    font_path = os.path.join(os.path.dirname(reportlab.__file__), "fonts", "Vera.ttf")
    monkeypatch.setattr(export.settings, "pdf_font_path", font_path)

    assert export._font_names() == ("Vera", "Vera")
    assert "Vera" in pdfmetrics.getRegisteredFontNames()
    monkeypatch.setattr(export.settings, "establishment_name", "Hotel <Main>")
    pdf = export.render_receipt(_receipt(), "ar")
    assert pdf.startswith(b"%PDF")
    assert b"Vera" in pdf
    assert export.render_inventory_report([], [], "ar").startswith(b"%PDF")


def test_missing_font_file_becomes_export_error(monkeypatch, tmp_path):
    monkeypatch.setattr(export.settings, "pdf_font_path", str(tmp_path / "NoSuchFont.ttf"))
    with pytest.raises(ExportError):
        export.render_receipt(_receipt(), "en")
