from __future__ import annotations

from pathlib import Path
import sys

import pytest
from sqlmodel import Session, SQLModel, create_engine

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from print_invoice.config import PrintInvoiceConfig
from print_invoice.data import LineItem, Order


@pytest.fixture()
def engine(tmp_path: Path):
    engine = create_engine(f"sqlite:///{tmp_path}/test.db")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def config(tmp_path: Path) -> PrintInvoiceConfig:
    return PrintInvoiceConfig(root=tmp_path, storage_path="tmp/pdf_prints")


@pytest.fixture()
def order(session: Session) -> Order:
    order = Order(
        number="R100",
        email="jane@example.com",
        completed_at="2024-03-01T10:00:00",
        item_total=30.0,
        shipment_total=5.0,
        total=35.0,
        bill_name="Jane Doe",
        bill_street="1 Main St",
        bill_zip="12345",
        bill_city="Springfield",
        bill_country="US",
        ship_name="Jane Doe",
        ship_street="1 Main St",
        ship_zip="12345",
        ship_city="Springfield",
        ship_country="US",
    )
    session.add(order)
    session.commit()
    session.refresh(order)
    session.add(LineItem(order_id=order.id, sku="TS-1", name="T-Shirt", options_text="Size: M", quantity=2, price=10.0))
    session.add(LineItem(order_id=order.id, sku="MUG-1", name="Mug", quantity=1, price=10.0))
    session.commit()
    session.refresh(order)
    return order
