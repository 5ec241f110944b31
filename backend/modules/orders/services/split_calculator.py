# backend/modules/orders/services/split_calculator.py

"""
Pure split strategies turning one item map into N item maps.

Only quantities are divided. Per-unit prices are kept, and each split
customization records the source price as ``originalPrice`` for audit.
Quantities are not rounded; fractional shares are expected downstream.
"""

from typing import Callable, List, Sequence

from ..schemas.split_bill_schemas import Customization, ItemLine, ItemMap


def _split_customization(customization: Customization, qty: float) -> Customization:
    data = customization.model_dump(by_alias=True, exclude_unset=True)
    data["qty"] = qty
    data["originalPrice"] = customization.price
    return Customization.model_validate(data)


def _scale_items(items: ItemMap, scale: Callable[[float], float]) -> ItemMap:
    """Build a fresh item map with every customization quantity passed through scale"""
    share: ItemMap = {}
    for item_id, line in items.items():
        share[item_id] = line.model_copy(
            update={
                "customizations": [
                    _split_customization(c, scale(c.qty)) for c in line.customizations
                ]
            },
            deep=True,
        )
    return share


def split_by_portion(items: ItemMap, count: int) -> List[ItemMap]:
    """
    Divide every quantity into ``count`` equal shares.

    Args:
        items: Item map of the original order
        count: Number of recipients, at least 1

    Returns:
        ``count`` structurally identical item maps
    """
    if count < 1:
        raise ValueError("count must be at least 1")

    return [_scale_items(items, lambda qty: qty / count) for _ in range(count)]


def split_by_percentage(items: ItemMap, percentages: Sequence[float]) -> List[ItemMap]:
    """
    Divide every quantity according to ``percentages``.

    The share at index ``i`` belongs to ``percentages[i]``. Zero quantities
    are kept.
    """
    return [
        _scale_items(items, lambda qty, p=percentage: qty * p / 100)
        for percentage in percentages
    ]
