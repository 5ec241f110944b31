# backend/modules/orders/__init__.py

from .enums.order_enums import SplitType
from .models.order_models import Order
from .routes.split_bill_routes import router as split_bill_router
from .services.split_bill_service import SplitBillService

__all__ = ["SplitType", "Order", "split_bill_router", "SplitBillService"]
