from __future__ import annotations

import logging
from pathlib import Path

import pytest

from print_invoice.config import PrintInvoiceConfig
from print_invoice.logging_setup import LOG_FILE_NAME, setup_logging


def _owned(root: logging.Logger) -> list[logging.Handler]:
    return [h for h in root.handlers if getattr(h, "_print_invoice_owned", False)]


@pytest.fixture()
def root_logger(monkeypatch: pytest.MonkeyPatch) -> logging.Logger:
    root = logging.getLogger()
    foreign = logging.NullHandler()
    monkeypatch.setattr(root, "handlers", [foreign])
    monkeypatch.setattr(root, "level", root.level)
    yield root
    for handler in root.handlers:
        if handler is not foreign:
            handler.close()


def test_setup_logging_writes_rotating_file(tmp_path: Path, root_logger: logging.Logger) -> None:
    config = PrintInvoiceConfig(root=tmp_path, log_level="debug", log_dir="var/log")

    setup_logging(config)
    logging.getLogger("print_invoice.tests").debug("pdf_cache.hit")

    assert root_logger.level == logging.DEBUG
    for handler in _owned(root_logger):
        handler.flush()
    log_text = (tmp_path / "var" / "log" / LOG_FILE_NAME).read_text(encoding="utf-8")
    assert "DEBUG [print_invoice.tests] pdf_cache.hit" in log_text


def test_setup_logging_twice_replaces_only_own_handlers(tmp_path: Path, root_logger: logging.Logger) -> None:
    foreign = root_logger.handlers[0]

    setup_logging(PrintInvoiceConfig(root=tmp_path))
    setup_logging(PrintInvoiceConfig(root=tmp_path, log_level="WARNING"))

    assert foreign in root_logger.handlers
    assert len(_owned(root_logger)) == 2
    assert root_logger.level == logging.WARNING


def test_setup_logging_without_log_dir_logs_to_stdout_only(tmp_path: Path, root_logger: logging.Logger) -> None:
    setup_logging(PrintInvoiceConfig(root=tmp_path, log_dir=None))

    assert len(_owned(root_logger)) == 1
    assert list(tmp_path.iterdir()) == []
