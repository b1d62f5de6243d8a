from __future__ import annotations

import logging
from typing import Optional

from sqlmodel import Session

from print_invoice.config import PrintInvoiceConfig
from print_invoice.invoice_numbering import DatabaseSequenceCounter, assign_invoice_number
from print_invoice.renderer_interface import AssetResolver, DocumentRenderer
from print_invoice.services.orders import OrderStore
from print_invoice.services.pdf_cache import pdf_file
from print_invoice.services.storage import pdf_filename

logger = logging.getLogger(__name__)


def print_order_pdf(
    session: Session,
    order_number: str,
    template_name: str,
    config: PrintInvoiceConfig,
    renderer: DocumentRenderer,
    resolver: Optional[AssetResolver] = None,
):
    """Admin "print" action: returns ``(pdf_bytes, download_filename)`` or ``(None, error)``."""
    store = OrderStore(session)
    order = store.find_by_number(order_number)
    if not order:
        return None, "Order not found"
    if template_name not in config.enabled_templates:
        logger.warning(
            "print_order_pdf.template_disabled",
            extra={"order_number": order_number, "template": template_name},
        )
        return None, "Template not enabled"

    counter = DatabaseSequenceCounter(session, start=config.next_number)
    assign_invoice_number(order, config, counter, store)

    pdf_bytes = pdf_file(order, template_name, config, renderer, resolver)
    return pdf_bytes, f"{pdf_filename(order)}.pdf"
