"""
Tests for the split bill workflow.
"""

import pytest
from unittest.mock import Mock

from core.exceptions import NotFoundError, ValidationError
from ..enums.order_enums import SplitType
from ..models.order_models import Order
from ..schemas.split_bill_schemas import SplitBillRequest, parse_item_map
from ..services.split_bill_service import SplitBillService, calculate_shares
from .factories import OrderFactory


class TestCalculateShares:
    def test_portion_request_uses_count(self):
        items = parse_item_map({"a": {"customizations": [{"qty": 4, "price": 1}]}})
        request = SplitBillRequest(
            table_id="t", order_id="o", split_type=SplitType.PORTION, count=4
        )

        shares = calculate_shares(request, items)

        assert len(shares) == 4
        assert all(s["a"].customizations[0].qty == 1 for s in shares)

    def test_percentage_request_uses_percentages(self):
        items = parse_item_map({"a": {"customizations": [{"qty": 4, "price": 1}]}})
        request = SplitBillRequest(
            table_id="t", order_id="o", split_type=SplitType.PERCENTAGE, percentages=[75, 25]
        )

        shares = calculate_shares(request, items)

        assert [s["a"].customizations[0].qty for s in shares] == [3, 1]


class TestSplitBill:
    @pytest.mark.asyncio
    async def test_portion_split(self, db_session, sample_order, completion_client):
        service = SplitBillService(db_session, completion_client)

        response = await service.split_bill(
            {"tableId": "table-7", "orderId": "order-123", "splitType": "portion", "count": 3}
        )

        assert response.message == "Bill split successful"
        assert [r.order_id for r in response.results] == [
            "order-123-split-1",
            "order-123-split-2",
            "order-123-split-3",
        ]
        for result in response.results:
            assert result.items["item-1"]["customizations"][0]["qty"] == 3
        completion_client.complete_order.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_percentage_split(self, db_session, completion_client):
        OrderFactory(
            id="order-77",
            table_id="table-4",
            json_data={"items": {"item-1": {"customizations": [{"qty": 20, "price": 8}]}}},
        )
        service = SplitBillService(db_session, completion_client)

        response = await service.split_bill(
            {
                "tableId": "table-4",
                "orderId": "order-77",
                "splitType": "percentage",
                "percentages": [40, 35, 25],
            }
        )

        quantities = [r.items["item-1"]["customizations"][0]["qty"] for r in response.results]
        assert quantities == [8, 7, 5]

    @pytest.mark.asyncio
    async def test_validation_runs_before_store_access(self, completion_client):
        store = Mock()
        service = SplitBillService(Mock(), completion_client, store)

        with pytest.raises(ValidationError):
            await service.split_bill({"tableId": "table-7", "splitType": "portion", "count": 2})

        store.fetch_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_order_not_found(self, db_session, completion_client):
        service = SplitBillService(db_session, completion_client)

        with pytest.raises(NotFoundError) as exc_info:
            await service.split_bill(
                {"tableId": "table-7", "orderId": "nope", "splitType": "portion", "count": 2}
            )

        assert exc_info.value.status_code == 404
        completion_client.complete_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_order_at_other_table_not_found(self, db_session, sample_order, completion_client):
        service = SplitBillService(db_session, completion_client)

        with pytest.raises(NotFoundError):
            await service.split_bill(
                {"tableId": "table-1", "orderId": "order-123", "splitType": "portion", "count": 2}
            )

    @pytest.mark.asyncio
    async def test_malformed_stored_items_rejected(self, db_session, completion_client):
        OrderFactory(
            id="order-bad",
            table_id="table-5",
            json_data={"items": {"item-1": {"customizations": [{"qty": "lots"}]}}},
        )
        service = SplitBillService(db_session, completion_client)

        with pytest.raises(ValidationError):
            await service.split_bill(
                {"tableId": "table-5", "orderId": "order-bad", "splitType": "portion", "count": 2}
            )

        assert db_session.query(Order).filter(Order.id.like("order-bad-split-%")).count() == 0

    @pytest.mark.asyncio
    async def test_numeric_ids_are_accepted(self, db_session, completion_client):
        OrderFactory(id="42", table_id="7")
        service = SplitBillService(db_session, completion_client)

        response = await service.split_bill(
            {"tableId": 7, "orderId": 42, "splitType": "portion", "count": 2}
        )

        assert [r.order_id for r in response.results] == ["42-split-1", "42-split-2"]

    @pytest.mark.asyncio
    async def test_list_valued_items_rejected(self, db_session, completion_client):
        OrderFactory(
            id="order-list",
            table_id="table-5",
            json_data={"items": [{"customizations": [{"qty": 2, "price": 4}]}]},
        )
        service = SplitBillService(db_session, completion_client)

        with pytest.raises(ValidationError) as exc_info:
            await service.split_bill(
                {"tableId": "table-5", "orderId": "order-list", "splitType": "portion", "count": 2}
            )

        assert exc_info.value.status_code == 400
        assert db_session.query(Order).filter(Order.id.like("order-list-split-%")).count() == 0
        completion_client.complete_order.assert_not_awaited()
