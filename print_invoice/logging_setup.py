from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler

from print_invoice.config import PrintInvoiceConfig


LOG_FILE_NAME = "print_invoice.log"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Marks handlers owned by this package so a second setup only swaps those.
_OWNED = "_print_invoice_owned"


def _owned_handlers(config: PrintInvoiceConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    log_path = config.log_path
    if log_path is not None:
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_path / LOG_FILE_NAME,
                maxBytes=config.log_max_bytes,
                backupCount=config.log_backup_count,
                encoding="utf-8",
            )
        )
    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _OWNED, True)
    return handlers


def setup_logging(config: PrintInvoiceConfig) -> None:
    """Route logs to stdout and, if ``config.log_dir`` is set, a rotating file.

    Safe to call again after the config changed; handlers installed by
    others (test runners, the host app) are left alone.
    """
    root_logger = logging.getLogger()
    for handler in [h for h in root_logger.handlers if getattr(h, _OWNED, False)]:
        root_logger.removeHandler(handler)
        handler.close()

    for handler in _owned_handlers(config):
        root_logger.addHandler(handler)
    root_logger.setLevel(config.log_level)
