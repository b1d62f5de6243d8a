from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Any, Optional

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen.canvas import Canvas

from print_invoice.config import PrintInvoiceConfig

logger = logging.getLogger(__name__)

_BOLD_FONTS = {
    "Helvetica": "Helvetica-Bold",
    "Times-Roman": "Times-Bold",
    "Courier": "Courier-Bold",
}


def _safe_str(x: Any) -> str:
    return (str(x) if x is not None else "").strip()


def _safe_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _wrap_text(text: str, font: str, size: float, max_width: float) -> list[str]:
    text = _safe_str(text)
    if not text:
        return [""]
    words = text.replace("\n", " ").split()
    lines: list[str] = []
    cur = ""
    for w in words:
        cand = (cur + " " + w).strip() if cur else w
        if stringWidth(cand, font, size) <= max_width:
            cur = cand
        else:
            if cur:
                lines.append(cur)
            cur = w
    if cur:
        lines.append(cur)
    return lines or [""]


def _money(value: Any, currency: str) -> str:
    return f"{_safe_float(value):,.2f} {currency}".strip()


def _address_lines(order: Any, prefix: str) -> list[str]:
    name = _safe_str(getattr(order, f"{prefix}_name", ""))
    street = _safe_str(getattr(order, f"{prefix}_street", ""))
    zip_code = _safe_str(getattr(order, f"{prefix}_zip", ""))
    city = _safe_str(getattr(order, f"{prefix}_city", ""))
    country = _safe_str(getattr(order, f"{prefix}_country", ""))
    lines = [name, street, f"{zip_code} {city}".strip(), country]
    return [ln for ln in lines if ln] or ["-"]


@dataclass
class _Column:
    title: str
    width: float
    align: str = "left"


class _DocumentCanvas(Canvas):
    """Canvas that adds footer and "Page x of y" once the page count is known."""

    config: Optional[PrintInvoiceConfig] = None

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._saved_page_states: list[dict] = []

    def showPage(self) -> None:
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self) -> None:
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_page_decorations(total)
            Canvas.showPage(self)
        Canvas.save(self)

    def _draw_page_decorations(self, total: int) -> None:
        config = self.config
        if config is None:
            return
        w, _h = self._pagesize
        margin_x = 18 * mm
        size = max(config.font_size - 1, 6)
        self.setFont(config.font_face, size)
        if config.use_footer:
            if config.footer_left:
                self.drawString(margin_x, 12 * mm, _safe_str(config.footer_left))
            if config.footer_right:
                self.drawRightString(w - margin_x, 12 * mm, _safe_str(config.footer_right))
        if config.use_page_numbers:
            self.drawCentredString(w / 2, 8 * mm, f"Page {self._pageNumber} of {total}")


class _OrderDocument:
    def __init__(self, config: PrintInvoiceConfig, title: str) -> None:
        self.config = config
        self.title = title
        self.buf = BytesIO()
        self.c = _DocumentCanvas(self.buf, pagesize=config.pagesize)
        self.c.config = config
        self.c.setTitle(title)
        self.w, self.h = config.pagesize
        self.margin_x = 18 * mm
        self.top = self.h - 18 * mm
        self.bottom = 26 * mm if (config.use_footer or config.use_page_numbers) else 18 * mm
        self.font = config.font_face
        self.font_b = _BOLD_FONTS.get(config.font_face, config.font_face)
        self.size = config.font_size
        self.y = self.top

    @property
    def content_width(self) -> float:
        return self.w - 2 * self.margin_x

    def text(self, x: float, y: float, s: Any, size: Optional[float] = None, bold: bool = False) -> None:
        self.c.setFont(self.font_b if bold else self.font, size or self.size)
        self.c.drawString(x, y, _safe_str(s))

    def text_r(self, x_right: float, y: float, s: Any, size: Optional[float] = None, bold: bool = False) -> None:
        self.c.setFont(self.font_b if bold else self.font, size or self.size)
        self.c.drawRightString(x_right, y, _safe_str(s))

    def new_page(self) -> None:
        self.c.showPage()
        self.y = self.top

    def header(self, logo_path: Optional[Path], meta: list[tuple[str, str]]) -> None:
        logo_h = 0.0
        if logo_path is not None:
            logo_h = self._draw_logo(logo_path)

        self.text_r(self.w - self.margin_x, self.top, self.title, size=self.size + 9, bold=True)
        meta_y = self.top - 20
        for label, value in meta:
            self.text_r(self.w - self.margin_x - 80, meta_y, f"{label}:", bold=True)
            self.text_r(self.w - self.margin_x, meta_y, value or "-")
            meta_y -= self.size + 3

        self.y = min(self.top - logo_h, meta_y) - 18

    def _draw_logo(self, logo_path: Path) -> float:
        try:
            logo = ImageReader(str(logo_path))
            iw, ih = logo.getSize()
        except Exception as exc:
            logger.warning(
                "invoice_pdf.logo_unreadable",
                exc_info=exc,
                extra={"logo_path": str(logo_path)},
            )
            return 0.0
        scale = self.config.logo_scale / 100.0
        max_w = self.content_width * 0.45
        max_h = 30 * mm
        scale = min(scale, max_w / iw, max_h / ih)
        draw_w = iw * scale
        draw_h = ih * scale
        self.c.drawImage(
            logo,
            self.margin_x,
            self.top + self.size - draw_h,
            width=draw_w,
            height=draw_h,
            mask="auto",
        )
        return draw_h

    def addresses(self, blocks: list[tuple[str, list[str]]]) -> None:
        col_w = self.content_width / max(len(blocks), 1)
        lowest = self.y
        for idx, (label, lines) in enumerate(blocks):
            x = self.margin_x + idx * col_w
            yy = self.y
            self.text(x, yy, label, bold=True)
            yy -= self.size + 4
            for ln in lines:
                for part in _wrap_text(ln, self.font, self.size, col_w - 12):
                    self.text(x, yy, part)
                    yy -= self.size + 3
            lowest = min(lowest, yy)
        self.y = lowest - 14

    def table(self, columns: list[_Column], rows: list[list[str]]) -> None:
        total_w = sum(col.width for col in columns)
        widths = [col.width / total_w * self.content_width for col in columns]
        line_h = self.size + 2
        row_h_min = line_h + 6

        def table_header() -> None:
            self.c.setLineWidth(0.5)
            self.c.rect(self.margin_x, self.y - row_h_min, self.content_width, row_h_min, stroke=1, fill=0)
            x = self.margin_x
            for col, width in zip(columns, widths):
                if col.align == "right":
                    self.text_r(x + width - 6, self.y - line_h, col.title, bold=True)
                else:
                    self.text(x + 6, self.y - line_h, col.title, bold=True)
                x += width
            self.y -= row_h_min + 2

        table_header()

        for row in rows:
            wrapped = [_wrap_text(cell, self.font, self.size, width - 12) for cell, width in zip(row, widths)]
            needed_h = max(row_h_min, 6 + max(len(lines) for lines in wrapped) * line_h)
            if self.y - needed_h < self.bottom + 20:
                self.new_page()
                table_header()

            self.c.rect(self.margin_x, self.y - needed_h, self.content_width, needed_h, stroke=1, fill=0)
            x = self.margin_x
            for col, width, lines in zip(columns, widths, wrapped):
                ty = self.y - line_h
                for ln in lines:
                    if col.align == "right":
                        self.text_r(x + width - 6, ty, ln)
                    else:
                        self.text(x + 6, ty, ln)
                    ty -= line_h
                x += width
            self.y -= needed_h

        self.y -= 12

    def totals(self, lines: list[tuple[str, str, bool]]) -> None:
        needed_h = len(lines) * (self.size + 6)
        if self.y - needed_h < self.bottom:
            self.new_page()
        right = self.w - self.margin_x
        for label, value, bold in lines:
            size = self.size + 2 if bold else self.size
            self.text_r(right - 110, self.y, label, size=size, bold=True)
            self.text_r(right, self.y, value, size=size, bold=bold)
            self.y -= size + 6

    def finish(self) -> bytes:
        self.c.showPage()
        self.c.save()
        return self.buf.getvalue()


def _meta(order: Any, include_invoice: bool) -> list[tuple[str, str]]:
    meta = [("Order", _safe_str(getattr(order, "number", "")))]
    if include_invoice:
        invoice_date = getattr(order, "invoice_date", None)
        meta.append(("Invoice", _safe_str(getattr(order, "invoice_number", ""))))
        meta.append(("Invoice date", invoice_date.isoformat() if invoice_date else ""))
    completed_at = _safe_str(getattr(order, "completed_at", ""))
    meta.append(("Order date", completed_at[:10]))
    return meta


def _line_items(order: Any) -> list[Any]:
    return list(getattr(order, "line_items", None) or [])


def render_invoice(order: Any, config: PrintInvoiceConfig, logo_path: Optional[Path] = None) -> bytes:
    currency = _safe_str(getattr(order, "currency", ""))
    doc = _OrderDocument(config, "Invoice")
    doc.header(logo_path, _meta(order, include_invoice=True))
    doc.addresses(
        [
            ("Bill To", _address_lines(order, "bill")),
            ("Ship To", _address_lines(order, "ship")),
        ]
    )

    columns = [
        _Column("SKU", 14),
        _Column("Item", 34),
        _Column("Options", 18),
        _Column("Price", 12, "right"),
        _Column("Qty", 8, "right"),
        _Column("Total", 14, "right"),
    ]
    rows = []
    for item in _line_items(order):
        quantity = int(_safe_float(getattr(item, "quantity", 0)))
        price = _safe_float(getattr(item, "price", 0))
        rows.append(
            [
                _safe_str(getattr(item, "sku", "")),
                _safe_str(getattr(item, "name", "")),
                _safe_str(getattr(item, "options_text", "")),
                _money(price, currency),
                str(quantity),
                _money(price * quantity, currency),
            ]
        )
    doc.table(columns, rows)

    totals = [("Subtotal", _money(getattr(order, "item_total", 0), currency), False)]
    adjustment_total = _safe_float(getattr(order, "adjustment_total", 0))
    if adjustment_total:
        totals.append(("Adjustments", _money(adjustment_total, currency), False))
    totals.append(("Shipping", _money(getattr(order, "shipment_total", 0), currency), False))
    tax_total = _safe_float(getattr(order, "tax_total", 0))
    if tax_total:
        totals.append(("Tax", _money(tax_total, currency), False))
    totals.append(("Total", _money(getattr(order, "total", 0), currency), True))
    doc.totals(totals)

    return doc.finish()


def render_packaging_slip(order: Any, config: PrintInvoiceConfig, logo_path: Optional[Path] = None) -> bytes:
    doc = _OrderDocument(config, "Packaging Slip")
    doc.header(logo_path, _meta(order, include_invoice=False))
    doc.addresses([("Ship To", _address_lines(order, "ship"))])

    columns = [
        _Column("SKU", 20),
        _Column("Item", 45),
        _Column("Options", 25),
        _Column("Qty", 10, "right"),
    ]
    rows = [
        [
            _safe_str(getattr(item, "sku", "")),
            _safe_str(getattr(item, "name", "")),
            _safe_str(getattr(item, "options_text", "")),
            str(int(_safe_float(getattr(item, "quantity", 0)))),
        ]
        for item in _line_items(order)
    ]
    doc.table(columns, rows)
    return doc.finish()
