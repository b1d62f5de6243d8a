from print_invoice.config import PrintInvoiceConfig
from print_invoice.invoice_numbering import assign_invoice_number
from print_invoice.services.assets import resolve_logo_path
from print_invoice.services.pdf_cache import get_document, pdf_file

__all__ = [
    "PrintInvoiceConfig",
    "assign_invoice_number",
    "get_document",
    "pdf_file",
    "resolve_logo_path",
]
