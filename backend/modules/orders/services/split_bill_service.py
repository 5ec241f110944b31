"""
Split bill workflow: validate, fetch, calculate, persist.
"""

import logging
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, ValidationError

from ..enums.order_enums import SplitType
from ..schemas.split_bill_schemas import (
    ItemMap,
    SplitBillRequest,
    SplitBillResponse,
    parse_item_map,
)
from ..validators.split_request_validator import validate_split_request
from .order_completion_service import OrderCompletionClient
from .order_store import OrderStore
from .split_calculator import split_by_percentage, split_by_portion
from .split_persistence_service import SplitPersistenceCoordinator

logger = logging.getLogger(__name__)


def calculate_shares(request: SplitBillRequest, items: ItemMap) -> List[ItemMap]:
    """Pick the split strategy matching the request's split type"""
    if request.split_type == SplitType.PORTION:
        return split_by_portion(items, request.count)
    if request.split_type == SplitType.PERCENTAGE:
        return split_by_percentage(items, request.percentages)
    raise ValueError(f"Unknown split type: {request.split_type}")


class SplitBillService:
    """Service for splitting a table's bill into several orders"""

    def __init__(
        self,
        db: Session,
        completion_client: OrderCompletionClient,
        store: Optional[OrderStore] = None,
    ):
        self.db = db
        self.store = store or OrderStore(db)
        self.coordinator = SplitPersistenceCoordinator(db, completion_client, self.store)

    async def split_bill(self, payload: Mapping[str, Any]) -> SplitBillResponse:
        """
        Split an order into equal portions or percentage shares.

        Args:
            payload: Raw request body (camelCase keys)

        Returns:
            SplitBillResponse listing every created order
        """
        validate_split_request(payload)
        request = self._build_request(payload)

        # The row lock is held until the split transaction commits or rolls back
        order = self.store.fetch_order(request.order_id, request.table_id, lock=True)
        if not order:
            raise NotFoundError("Order not found")

        try:
            items = parse_item_map(order.items)
        except PydanticValidationError as e:
            logger.error(f"Order {request.order_id} has malformed items: {e}")
            raise ValidationError(f"Order {request.order_id} has malformed items")

        shares = calculate_shares(request, items)
        logger.info(
            f"Splitting order {request.order_id} at table {request.table_id} "
            f"by {request.split_type.value} into {len(shares)} shares"
        )

        results = await self.coordinator.create_split_orders(
            order, shares, request.table_id, request.order_id
        )
        return SplitBillResponse(results=results)

    @staticmethod
    def _build_request(payload: Mapping[str, Any]) -> SplitBillRequest:
        split_type = SplitType(payload["splitType"])
        return SplitBillRequest(
            table_id=str(payload["tableId"]),
            order_id=str(payload["orderId"]),
            split_type=split_type,
            count=int(payload["count"]) if split_type == SplitType.PORTION else None,
            percentages=(
                [float(p) for p in payload["percentages"]]
                if split_type == SplitType.PERCENTAGE
                else None
            ),
        )
