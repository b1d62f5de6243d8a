from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Optional

from print_invoice.config import PrintInvoiceConfig
from print_invoice.errors import UnknownTemplateError
from print_invoice.services.invoice_pdf import render_invoice, render_packaging_slip

logger = logging.getLogger(__name__)

TemplateFn = Callable[[Any, PrintInvoiceConfig, Optional[Path]], bytes]

TEMPLATES: dict[str, TemplateFn] = {
    "invoice": render_invoice,
    "packaging_slip": render_packaging_slip,
}


class ReportlabRenderer:
    def __init__(self, config: PrintInvoiceConfig, templates: Optional[dict[str, TemplateFn]] = None) -> None:
        self.config = config
        self.templates = dict(templates or TEMPLATES)

    def render(self, template_name: str, order: Any, logo_path: Optional[Path] = None) -> bytes:
        template = self.templates.get(template_name)
        if template is None:
            raise UnknownTemplateError(template_name)
        pdf_bytes = template(order, self.config, logo_path)
        logger.info(
            "renderer.rendered",
            extra={"template": template_name, "order_number": getattr(order, "number", None), "size": len(pdf_bytes)},
        )
        return bytes(pdf_bytes)
