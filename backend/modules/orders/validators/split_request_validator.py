# backend/modules/orders/validators/split_request_validator.py

import math
from numbers import Real
from typing import Any, Mapping, Optional

from core.config import settings
from core.exceptions import ValidationError

from ..enums.order_enums import SplitType

SPLIT_TYPES = {split_type.value for split_type in SplitType}


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _is_id(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (str, int))


def _is_whole_number(value: Any) -> bool:
    if not _is_number(value):
        return False
    return isinstance(value, int) or float(value).is_integer()


def validate_split_request(
    payload: Mapping[str, Any], tolerance: Optional[float] = None
) -> None:
    """
    Validate the shape of a split bill request.

    Runs before any database access. Only the payload field matching
    ``splitType`` is checked; the other one is ignored.

    Raises:
        ValidationError: if a field is missing, malformed or out of range
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")

    if tolerance is None:
        tolerance = settings.split_percentage_tolerance

    table_id = payload.get("tableId")
    order_id = payload.get("orderId")
    split_type = payload.get("splitType")

    if not table_id or not order_id or not split_type:
        raise ValidationError("tableId, orderId, and splitType are required")

    if not _is_id(table_id) or not _is_id(order_id):
        raise ValidationError("tableId and orderId must be strings or integers")

    if not isinstance(split_type, str) or split_type not in SPLIT_TYPES:
        raise ValidationError('splitType must be either "portion" or "percentage"')

    if split_type == SplitType.PORTION.value:
        count = payload.get("count")
        if not _is_whole_number(count) or count < 1:
            raise ValidationError("For portion split, count must be a positive integer")

    elif split_type == SplitType.PERCENTAGE.value:
        percentages = payload.get("percentages")
        if not isinstance(percentages, (list, tuple)) or len(percentages) == 0:
            raise ValidationError(
                "For percentage split, percentages must be a non-empty array"
            )

        if not all(_is_number(p) for p in percentages):
            raise ValidationError("All percentages must be numbers")

        if abs(sum(percentages) - 100) > tolerance:
            raise ValidationError("Percentages must sum to 100")

        if any(p <= 0 for p in percentages):
            raise ValidationError("All percentages must be greater than 0")
