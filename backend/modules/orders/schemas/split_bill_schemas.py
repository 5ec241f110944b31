"""
Split bill schemas for item payloads, requests and responses.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from ..enums.order_enums import SplitType


class Customization(BaseModel):
    """One priced sub-line of an ordered item.

    ``price`` is per unit and never split; only ``qty`` changes between shares.
    Unknown keys (names, addon ids, ...) are kept as-is.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    qty: float = Field(..., ge=0, description="Quantity of this customization")
    price: float = Field(..., ge=0, description="Per-unit price")
    original_price: Optional[float] = Field(
        None, alias="originalPrice", description="Per-unit price before the split"
    )


class ItemLine(BaseModel):
    """An ordered item with its customizations"""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    customizations: List[Customization] = Field(default_factory=list)


ItemMap = Dict[str, ItemLine]

_item_map_adapter = TypeAdapter(ItemMap)


def parse_item_map(raw_items: Any) -> ItemMap:
    """
    Build typed item lines from the ``json_data.items`` payload of an order.

    Raises pydantic's ValidationError if the payload is not a mapping of
    item lines.
    """
    return _item_map_adapter.validate_python(raw_items)


def dump_item_map(items: ItemMap) -> Dict[str, Any]:
    """Inverse of parse_item_map, keeping the stored camelCase keys"""
    return {
        item_id: line.model_dump(by_alias=True, exclude_unset=True)
        for item_id, line in items.items()
    }


class SplitBillRequest(BaseModel):
    """A validated split request"""

    model_config = ConfigDict(populate_by_name=True)

    table_id: str = Field(..., alias="tableId")
    order_id: str = Field(..., alias="orderId")
    split_type: SplitType = Field(..., alias="splitType")
    count: Optional[int] = Field(None, ge=1, description="Number of equal portions")
    percentages: Optional[List[float]] = Field(
        None, description="Share of each recipient, in order; sums to 100"
    )


class SplitOrderResult(BaseModel):
    """One derived order created by a split"""

    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(..., alias="orderId")
    items: Dict[str, Any]
    bill_data: Dict[str, Any] = Field(..., alias="billData")


class SplitBillResponse(BaseModel):
    """Response after splitting a bill"""

    model_config = ConfigDict(populate_by_name=True)

    message: str = "Bill split successful"
    results: List[SplitOrderResult]


class CompletionResult(BaseModel):
    """Outcome of asking the order engine to close a table's order"""

    success: bool
    status_code: Optional[int] = None
    detail: Optional[Any] = None
