from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import HTTPException, Response
from nicegui import app, ui
from sqlmodel import select

from print_invoice.actions import print_order_pdf
from print_invoice.config import PrintInvoiceConfig
from print_invoice.data import Order, get_session, init_engine
from print_invoice.logging_setup import setup_logging
from print_invoice.renderer import ReportlabRenderer

logger = logging.getLogger(__name__)

config = PrintInvoiceConfig.from_env()
renderer = ReportlabRenderer(config)


def _template_label(template_name: str) -> str:
    return template_name.replace("_", " ").title()


@app.get("/admin/orders/{number}/{template}.pdf")
def order_pdf(number: str, template: str) -> Response:
    with get_session() as session:
        pdf_bytes, result = print_order_pdf(session, number, template, config, renderer)
    if pdf_bytes is None:
        raise HTTPException(status_code=404, detail=result)
    return Response(
        pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{result}"'},
    )


@ui.page("/")
def orders_page() -> None:
    ui.label("Orders").classes("text-2xl font-bold")
    with get_session() as session:
        orders = session.exec(select(Order).order_by(Order.id.desc())).all()

    if not orders:
        ui.label("No orders yet.").classes("text-gray-500")
        return

    with ui.column().classes("w-full gap-2"):
        for order in orders:
            with ui.row().classes("w-full items-center gap-4"):
                ui.label(order.number).classes("font-mono w-32")
                ui.label(order.invoice_number or "-").classes("w-32")
                ui.label(f"{order.total:,.2f} {order.currency}").classes("w-32 text-right")
                for template in config.enabled_templates:
                    url = f"/admin/orders/{quote(order.number)}/{quote(template)}.pdf"
                    ui.button(_template_label(template)).props(f"outline href='{url}' target='_blank'")


def run() -> None:
    setup_logging(config)
    init_engine()
    logger.info("print_invoice.start", extra={"store_pdf": config.store_pdf})
    ui.run(title="Print Invoice", port=8000, reload=False)


if __name__ in {"__main__", "__mp_main__"}:
    run()
