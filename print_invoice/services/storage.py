from __future__ import annotations

from pathlib import Path
from typing import Any
from urllib.parse import quote

from print_invoice.config import PrintInvoiceConfig
from print_invoice.errors import classify_os_error


_ES_SUFFIXES = ("s", "x", "z", "ch", "sh")
_VOWELS = set("aeiou")


def pluralize(name: str) -> str:
    word = (name or "").strip()
    if not word:
        return word
    lower = word.lower()
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in _VOWELS:
        return f"{word[:-1]}ies"
    if lower.endswith(_ES_SUFFIXES):
        return f"{word}es"
    return f"{word}s"


def is_present(value: Any) -> bool:
    """None and blank strings are absent, anything else (including 0) is present."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def _encode_filename(value: str) -> str:
    # Percent-encoding keeps distinct numbers on distinct files.
    encoded = quote(value, safe="")
    if encoded.startswith("."):
        encoded = "%2E" + encoded[1:]
    return encoded


def pdf_filename(order: Any) -> str:
    """Invoice number if the order has one, otherwise the order number."""
    invoice_number = getattr(order, "invoice_number", None)
    raw = invoice_number if is_present(invoice_number) else getattr(order, "number", None)
    if not is_present(raw):
        raise ValueError("Order has neither an invoice number nor an order number")
    return _encode_filename(str(raw))


def pdf_storage_path(config: PrintInvoiceConfig, template_name: str) -> Path:
    """Folder for one template, e.g. ``tmp/pdf_prints/invoices``. Created on demand."""
    path = config.storage_root / pluralize(template_name)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise classify_os_error("mkdir", path, exc) from exc
    return path


def pdf_file_path(config: PrintInvoiceConfig, template_name: str, order: Any) -> Path:
    return pdf_storage_path(config, template_name) / f"{pdf_filename(order)}.pdf"
