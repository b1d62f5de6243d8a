from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from sqlmodel import Session, select

from print_invoice.config import PrintInvoiceConfig
from print_invoice.data import InvoiceSequence
from print_invoice.renderer_interface import SequenceCounter
from print_invoice.services.storage import is_present

logger = logging.getLogger(__name__)


class _SafeDict(dict):
    def __missing__(self, key: str) -> str:
        return ""


def build_invoice_number(config: PrintInvoiceConfig, seq: int | str) -> str:
    template = (config.invoice_number_format or "{seq}").strip() or "{seq}"
    return template.format_map(_SafeDict({"seq": seq}))


class DatabaseSequenceCounter:
    """Invoice counter stored in the single ``invoice_sequence`` row.

    The row is locked with SELECT ... FOR UPDATE and incremented in the
    caller's transaction, so the number is only consumed when that
    transaction commits.
    """

    def __init__(self, session: Session, start: int = 1) -> None:
        self.session = session
        self.start = start

    def next(self) -> int:
        sequence = self.session.exec(
            select(InvoiceSequence).where(InvoiceSequence.id == 1).with_for_update()
        ).first()
        if sequence is None:
            sequence = InvoiceSequence(id=1, next_value=self.start)
        current = sequence.next_value
        sequence.next_value = current + 1
        self.session.add(sequence)
        self.session.flush()
        return current


def assign_invoice_number(
    order: Any,
    config: PrintInvoiceConfig,
    counter: SequenceCounter,
    store: Any,
    today: Optional[date] = None,
) -> bool:
    """Give ``order`` its invoice number and date, once.

    No-op when sequential numbering is disabled or the order already has a
    number. The write goes through ``store.update_columns`` and therefore
    skips the order's save hooks. Returns True when a number was assigned.
    """
    if not config.use_sequential_number:
        return False
    if is_present(order.invoice_number):
        return False

    invoice_number = build_invoice_number(config, counter.next())
    invoice_date = today or date.today()
    store.update_columns(order, invoice_number=invoice_number, invoice_date=invoice_date)
    logger.info(
        "invoice_numbering.assigned",
        extra={"order_number": order.number, "invoice_number": invoice_number},
    )
    return True
