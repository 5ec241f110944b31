# backend/modules/orders/services/split_persistence_service.py

"""
Persists the shares of a split bill as new orders.

All derived orders are written in one transaction: either every share
becomes an order or none does. Completing the original order happens only
after the commit and is best-effort, since it cannot be rolled back.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import settings
from core.exceptions import ConflictError, PersistenceError
from core.query_logger import log_query_performance

from ..models.order_models import Order
from ..schemas.split_bill_schemas import (
    CompletionResult,
    ItemMap,
    SplitOrderResult,
    dump_item_map,
)
from .order_completion_service import OrderCompletionClient
from .order_store import OrderStore

logger = logging.getLogger(__name__)


def split_order_id(original_order_id: str, index: int) -> str:
    """ID of the derived order holding share ``index`` (zero based)"""
    return f"{original_order_id}-split-{index + 1}"


class SplitPersistenceCoordinator:
    """Writes split orders atomically, then closes the original order"""

    def __init__(
        self,
        db: Session,
        completion_client: OrderCompletionClient,
        store: Optional[OrderStore] = None,
    ):
        self.db = db
        self.completion_client = completion_client
        self.store = store or OrderStore(db)

    async def create_split_orders(
        self,
        original_order: Order,
        shares: Sequence[ItemMap],
        table_id: str,
        original_order_id: str,
    ) -> List[SplitOrderResult]:
        """
        Create one order per share, cloned from the original order.

        Args:
            original_order: The order being split
            shares: Item maps produced by the split calculator
            table_id: Table the original order belongs to
            original_order_id: ID of the original order

        Returns:
            One result per created order, in share order

        Raises:
            ConflictError: a derived order id already exists
            PersistenceError: an insert failed; nothing was written
        """
        restaurant_id = original_order.restaurant_id
        order_table_id = original_order.table_id or table_id
        results: List[SplitOrderResult] = []

        try:
            with log_query_performance("create_split_orders"):
                for index, share in enumerate(shares):
                    new_order_id = split_order_id(original_order_id, index)
                    items = dump_item_map(share)

                    row = self.store.insert_order_cloning_from(
                        original_order_id, new_order_id, {"items": items}
                    )
                    if row is None:
                        raise PersistenceError(f"Failed to create split order {new_order_id}")

                    results.append(
                        SplitOrderResult(order_id=new_order_id, items=items, bill_data=row)
                    )

            self.db.commit()

        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Split of order {original_order_id} conflicts with existing orders: {e}")
            derived_ids = [split_order_id(original_order_id, i) for i in range(len(shares))]
            if self.store.existing_order_ids(derived_ids):
                raise ConflictError(f"Order {original_order_id} has already been split")
            raise ConflictError(f"Split of order {original_order_id} conflicts with existing data")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error during split of order {original_order_id}: {str(e)}")
            raise PersistenceError(f"Failed to split order {original_order_id}")
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Split order {original_order_id} into {len(results)} orders: "
            f"{[r.order_id for r in results]}"
        )

        await self._complete_original_order(original_order_id, restaurant_id, order_table_id)
        self._log_remaining_table_orders(restaurant_id, order_table_id)

        return results

    async def _complete_original_order(
        self, order_id: str, restaurant_id: str, table_id: str
    ) -> Optional[CompletionResult]:
        """Close the original order; failures are logged and never raised"""
        try:
            result = await self.completion_client.complete_order(
                restaurant_id, table_id, 0, settings.split_payment_method
            )
        except Exception:
            logger.exception(
                f"Error completing order {order_id} after split; split was successful"
            )
            return None

        if not isinstance(result, CompletionResult):
            logger.warning(
                f"Order engine gave no usable result completing order {order_id}, "
                f"but split was successful (got {result!r})"
            )
            return None

        if result.success:
            logger.info(f"Original order {order_id} completed after split")
        else:
            logger.warning(
                f"Failed to complete original order {order_id}, but split was successful "
                f"(status={result.status_code}, detail={result.detail})"
            )
        return result

    def _log_remaining_table_orders(self, restaurant_id: str, table_id: str):
        if not logger.isEnabledFor(logging.DEBUG):
            return
        try:
            remaining = self.store.list_table_orders(restaurant_id, table_id)
            logger.debug(
                f"Orders open at restaurant {restaurant_id} table {table_id} "
                f"after completion: {remaining}"
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.debug(f"Could not list orders for table {table_id}: {e}")
