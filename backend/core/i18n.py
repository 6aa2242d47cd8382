"""
English / Arabic labels for receipts and reports.

Plain literal selection: no catalogs, no plural rules.
"""

from typing import Dict

LANGUAGES = ("en", "ar")

LABELS: Dict[str, Dict[str, str]] = {
    "receipt_title": {"en": "Inventory Dispense Receipt", "ar": "فاتورة صرف مخزون"},
    "receive_title": {"en": "Inventory Receipt Voucher", "ar": "سند استلام مخزون"},
    "report_title": {"en": "Inventory Report", "ar": "تقرير المخزون"},
    "transaction_id": {"en": "Transaction ID", "ar": "رقم المعاملة"},
    "date": {"en": "Date", "ar": "التاريخ"},
    "item_name": {"en": "Item Name", "ar": "اسم الصنف"},
    "quantity": {"en": "Quantity", "ar": "الكمية"},
    "unit": {"en": "Unit", "ar": "الوحدة"},
    "notes": {"en": "Notes", "ar": "ملاحظات"},
    "department": {"en": "Department", "ar": "القسم"},
    "inventory_summary": {"en": "Inventory Summary", "ar": "ملخص المخزون"},
    "transactions_summary": {"en": "Transactions Summary", "ar": "ملخص المعاملات"},
    "total_transactions": {"en": "Total Transactions", "ar": "إجمالي المعاملات"},
    "low_stock": {"en": "Low Stock Items", "ar": "أصناف تحت الحد الأدنى"},
}


def normalize_language(language) -> str:
    lang = (language or "").strip().lower()
    return lang if lang in LANGUAGES else "en"


def label(key: str, language: str) -> str:
    return LABELS[key][normalize_language(language)]


def item_display_name(name: str, name_ar: str, language: str) -> str:
    """Arabic name when asked for and present, English otherwise."""
    if normalize_language(language) == "ar" and name_ar:
        return name_ar
    return name or name_ar or ""
