from __future__ import annotations

import errno
from pathlib import Path
from types import SimpleNamespace

import pytest

from print_invoice.config import PrintInvoiceConfig
from print_invoice.errors import (
    StorageIOFailure,
    StorageNotFound,
    StoragePermissionDenied,
    classify_os_error,
)
from print_invoice.services.storage import (
    pdf_file_path,
    pdf_filename,
    pdf_storage_path,
    pluralize,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("invoice", "invoices"),
        ("packaging_slip", "packaging_slips"),
        ("delivery", "deliveries"),
        ("day", "days"),
        ("box", "boxes"),
        ("batch", "batches"),
    ],
)
def test_pluralize(name: str, expected: str) -> None:
    assert pluralize(name) == expected


def test_pdf_filename_prefers_invoice_number() -> None:
    assert pdf_filename(SimpleNamespace(number="R100", invoice_number="INV-5")) == "INV-5"
    assert pdf_filename(SimpleNamespace(number="R100", invoice_number=None)) == "R100"
    assert pdf_filename(SimpleNamespace(number="R100", invoice_number="")) == "R100"


def test_pdf_filename_cannot_escape_storage_folder() -> None:
    name = pdf_filename(SimpleNamespace(number="R100", invoice_number="../../etc/passwd"))
    assert "/" not in name
    assert not name.startswith(".")


@pytest.mark.parametrize(
    ("first", "second"),
    [
        ("2024/7", "2024-7"),
        ("INV 5", "INV_5"),
        ("INV%205", "INV 5"),
        ("..", "%2E."),
        (".5", "5"),
    ],
)
def test_distinct_numbers_get_distinct_filenames(first: str, second: str) -> None:
    a = pdf_filename(SimpleNamespace(number="R1", invoice_number=first))
    b = pdf_filename(SimpleNamespace(number="R2", invoice_number=second))
    assert a != b


@pytest.mark.parametrize("blank", [None, "", "   "])
def test_blank_invoice_number_falls_back_to_order_number(blank) -> None:
    assert pdf_filename(SimpleNamespace(number="R100", invoice_number=blank)) == "R100"


def test_zero_invoice_number_is_present() -> None:
    assert pdf_filename(SimpleNamespace(number="R100", invoice_number=0)) == "0"


def test_order_without_any_number_is_rejected() -> None:
    with pytest.raises(ValueError):
        pdf_filename(SimpleNamespace(number="  ", invoice_number=None))


def test_storage_layout_for_invoice(tmp_path: Path) -> None:
    config = PrintInvoiceConfig(root=tmp_path, storage_path="tmp/pdf_prints")
    order = SimpleNamespace(number="R100", invoice_number=None)

    path = pdf_file_path(config, "invoice", order)

    assert path == tmp_path / "tmp" / "pdf_prints" / "invoices" / "R100.pdf"
    assert path.parent.is_dir()
    assert not path.exists()


def test_storage_path_creation_is_idempotent(tmp_path: Path) -> None:
    config = PrintInvoiceConfig(root=tmp_path)
    first = pdf_storage_path(config, "invoice")
    second = pdf_storage_path(config, "invoice")
    assert first == second
    assert first.is_dir()


def test_storage_path_on_a_file_raises_storage_error(tmp_path: Path) -> None:
    (tmp_path / "blocked").write_text("not a directory")
    config = PrintInvoiceConfig(root=tmp_path, storage_path="blocked")

    with pytest.raises((StorageNotFound, StorageIOFailure)):
        pdf_storage_path(config, "invoice")


def test_classify_os_error() -> None:
    assert isinstance(classify_os_error("read", "x", FileNotFoundError(errno.ENOENT, "missing")), StorageNotFound)
    assert isinstance(classify_os_error("write", "x", PermissionError(errno.EACCES, "denied")), StoragePermissionDenied)
    assert isinstance(classify_os_error("write", "x", OSError(errno.ENOSPC, "disk full")), StorageIOFailure)
