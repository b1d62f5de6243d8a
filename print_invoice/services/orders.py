from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import update
from sqlalchemy.orm.attributes import set_committed_value
from sqlmodel import Session, select

from print_invoice.data import Order

logger = logging.getLogger(__name__)


class OrderStore:
    """Persistence for orders with two deliberate write paths.

    ``save`` goes through the ORM and fires the save hooks in ``data``.
    ``update_columns`` writes straight to the table and fires nothing. It
    commits the session, so it refuses to run while other ORM changes are
    pending; those would be flushed and hooked along with it.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_number(self, number: str) -> Optional[Order]:
        return self.session.exec(select(Order).where(Order.number == number)).first()

    def save(self, order: Order) -> Order:
        self.session.add(order)
        self.session.commit()
        self.session.refresh(order)
        return order

    def _has_pending_changes(self) -> bool:
        session = self.session
        if session.new or session.deleted:
            return True
        return any(session.is_modified(obj, include_collections=False) for obj in session.dirty)

    def update_columns(self, order: Order, **values: Any) -> None:
        if order.id is None:
            raise ValueError("Order must be persisted before its columns can be updated")
        if self._has_pending_changes():
            raise ValueError("update_columns needs a session without pending ORM changes")
        table = Order.__table__
        self.session.connection().execute(
            update(table).where(table.c.id == order.id).values(**values)
        )
        self.session.commit()
        for key, value in values.items():
            set_committed_value(order, key, value)
        logger.debug(
            "orders.columns_updated",
            extra={"order_number": order.number, "columns": sorted(values)},
        )
