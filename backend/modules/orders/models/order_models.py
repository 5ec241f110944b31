from sqlalchemy import Boolean, Column, Integer, JSON, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from core.database import Base
from core.mixins import TimestampMixin


JSONType = JSON().with_variant(JSONB(), "postgresql")


class Order(Base, TimestampMixin):
    """An open order at a restaurant table.

    ``json_data`` holds ``{"items": {item_id: item_line}}``; every other
    column is billing metadata carried verbatim onto split clones.
    """

    __tablename__ = "orders"

    id = Column(String, primary_key=True, index=True)
    restaurant_id = Column(String, nullable=False, index=True)
    table_id = Column(String, nullable=False, index=True)
    json_data = Column(JSONType, nullable=False)
    instructions = Column(Text, nullable=True)

    # Billing metadata
    pos_bill_data = Column(JSONType, nullable=True)
    ready_for_review = Column(Boolean, nullable=False, default=False)
    razorpay_order_id = Column(String, nullable=True)
    invoice_number = Column(String, nullable=True)
    guest_count = Column(Integer, nullable=True)
    is_reservation = Column(Boolean, nullable=False, default=False)

    # Offers and discounts
    offer_given = Column(Boolean, nullable=False, default=False)
    offer_availed = Column(Boolean, nullable=False, default=False)
    offer_partially_availed = Column(Boolean, nullable=False, default=False)
    drink_offer_given = Column(Boolean, nullable=False, default=False)
    dessert_offer_given = Column(Boolean, nullable=False, default=False)
    discount_applied = Column(Boolean, nullable=False, default=False)
    discount_value = Column(Numeric(10, 2), nullable=True)
    discount_id = Column(String, nullable=True)
    additional_discount = Column(Numeric(10, 2), nullable=True)
    disable_service_charge = Column(Boolean, nullable=False, default=False)

    # Payment processing flags
    is_payment_thirdparty = Column(Boolean, nullable=False, default=False)
    payment_failed = Column(Boolean, nullable=False, default=False)

    @property
    def items(self) -> dict:
        return (self.json_data or {}).get("items") or {}
