import logging
import os
from contextlib import contextmanager
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Field, Relationship, Session, SQLModel, create_engine

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///storage/print_invoice.db"


# --- DB MODELS ---
class Order(SQLModel, table=True):
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    number: str = Field(index=True, unique=True)
    email: str = ""
    state: str = "complete"
    completed_at: str = ""
    currency: str = "USD"

    item_total: float = 0.0
    shipment_total: float = 0.0
    adjustment_total: float = 0.0
    tax_total: float = 0.0
    total: float = 0.0

    bill_name: str = ""
    bill_street: str = ""
    bill_zip: str = ""
    bill_city: str = ""
    bill_country: str = ""
    ship_name: str = ""
    ship_street: str = ""
    ship_zip: str = ""
    ship_city: str = ""
    ship_country: str = ""

    invoice_number: Optional[str] = Field(default=None, index=True)
    invoice_date: Optional[date] = None
    updated_at: str = Field(default_factory=lambda: datetime.now().isoformat())

    line_items: List["LineItem"] = Relationship(back_populates="order")


class LineItem(SQLModel, table=True):
    __tablename__ = "line_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id")
    sku: str = ""
    name: str
    options_text: str = ""
    quantity: int = 1
    price: float = 0.0

    order: Optional[Order] = Relationship(back_populates="line_items")

    @property
    def amount(self) -> float:
        return self.quantity * self.price


class InvoiceSequence(SQLModel, table=True):
    __tablename__ = "invoice_sequence"

    id: int = Field(default=1, primary_key=True)
    next_value: int = Field(default=1)


_engine: Optional[Engine] = None


def init_engine(url: Optional[str] = None) -> Engine:
    global _engine
    url = url or os.getenv("PRINT_INVOICE_DATABASE_URL", DEFAULT_DATABASE_URL)
    if url.startswith("sqlite:///") and not url.startswith("sqlite:///:memory:"):
        db_file = url[len("sqlite:///"):]
        db_dir = os.path.dirname(db_file)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
    _engine = create_engine(url)
    SQLModel.metadata.create_all(_engine)
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        return init_engine()
    return _engine


@contextmanager
def get_session():
    with Session(get_engine()) as session:
        yield session


@event.listens_for(Session, "before_flush")
def touch_changed_orders(session, flush_context, instances):
    # Save hook: every ORM update of an order bumps updated_at.
    for obj in session.dirty:
        if isinstance(obj, Order) and session.is_modified(obj, include_collections=False):
            obj.updated_at = datetime.now().isoformat()
            logger.info("order.changed", extra={"order_number": obj.number})
