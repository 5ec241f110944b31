"""
API routes for splitting a table's bill.
"""

from typing import Any, AsyncIterator, Dict

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from core.database import get_db
from core.decorators import handle_api_errors
from ..schemas.split_bill_schemas import SplitBillResponse
from ..services.order_completion_service import (
    HttpOrderCompletionService,
    OrderCompletionClient,
)
from ..services.split_bill_service import SplitBillService

router = APIRouter(prefix="/api/v1/orders", tags=["split-bill"])


async def get_order_completion_client() -> AsyncIterator[OrderCompletionClient]:
    client = HttpOrderCompletionService()
    try:
        yield client
    finally:
        await client.aclose()


@router.post("/split-bill", response_model=SplitBillResponse)
@handle_api_errors
async def split_bill(
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    completion_client: OrderCompletionClient = Depends(get_order_completion_client),
):
    """
    Split an open order into several orders.

    - **portion**: `count` equal shares of every item quantity
    - **percentage**: one share per entry of `percentages` (must sum to 100)

    Each share becomes a new order `{orderId}-split-{n}` carrying the
    original order's billing data. The original order is then completed
    with payment method `split`; if that fails the split still succeeds.
    """
    service = SplitBillService(db, completion_client)
    return await service.split_bill(payload)
