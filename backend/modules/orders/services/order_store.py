# backend/modules/orders/services/order_store.py

"""
Data access for the ``orders`` table used by the split bill workflow.

The store never commits; every call joins whatever transaction the
session has open, so the caller decides the unit of work.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import insert, literal, select
from sqlalchemy.orm import Session

from ..models.order_models import Order

logger = logging.getLogger(__name__)

# Columns a clone never inherits from its source row
NON_COPIED_COLUMNS = {"id", "json_data", "created_at", "updated_at"}


class OrderStore:
    """Reads orders and clones them into sibling rows"""

    def __init__(self, db: Session):
        self.db = db

    def fetch_order(
        self, order_id: str, table_id: str, lock: bool = False
    ) -> Optional[Order]:
        """
        Fetch an order by id scoped to its table.

        Args:
            order_id: ID of the order
            table_id: Table the order must belong to
            lock: Take a row lock (``SELECT ... FOR UPDATE``) for the rest
                of the current transaction

        Returns:
            The order, or None if no order matches
        """
        stmt = select(Order).where(Order.id == order_id, Order.table_id == table_id)
        if lock:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalars().first()

    def insert_order_cloning_from(
        self,
        original_order_id: str,
        new_order_id: str,
        items_payload: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """
        Insert a copy of an existing order with a new id and item payload.

        Runs as one ``INSERT ... SELECT ... RETURNING`` statement so the copy
        reflects the source row as the database sees it.

        Returns:
            The inserted row as a dict, or None if the source row is missing
        """
        table = Order.__table__
        copied = [c for c in table.columns if c.name not in NON_COPIED_COLUMNS]

        source = select(
            literal(new_order_id, type_=table.c.id.type),
            literal(items_payload, type_=table.c.json_data.type),
            *copied,
        ).where(table.c.id == original_order_id)

        stmt = (
            insert(table)
            .from_select(["id", "json_data", *[c.name for c in copied]], source)
            .returning(*table.columns)
        )

        row = self.db.execute(stmt).mappings().first()
        if row is None:
            logger.debug(f"Clone of order {original_order_id} as {new_order_id} returned no row")
            return None
        return dict(row)

    def existing_order_ids(self, order_ids: List[str]) -> List[str]:
        """Which of ``order_ids`` already have a row"""
        if not order_ids:
            return []
        stmt = select(Order.id).where(Order.id.in_(order_ids))
        return list(self.db.execute(stmt).scalars().all())

    def list_table_orders(self, restaurant_id: str, table_id: str) -> List[str]:
        """IDs of orders still open at a table"""
        stmt = select(Order.id).where(
            Order.restaurant_id == restaurant_id, Order.table_id == table_id
        )
        return list(self.db.execute(stmt).scalars().all())
