# backend/modules/orders/services/order_completion_service.py

"""
Client for the order engine's "complete order" operation.

Completing an order finalizes billing for a table. It lives in the order
engine; the split workflow only asks for it once the split is committed.
"""

import logging
from typing import Optional, Protocol

import httpx

from core.config import settings

from ..schemas.split_bill_schemas import CompletionResult

logger = logging.getLogger(__name__)


class OrderCompletionClient(Protocol):
    async def complete_order(
        self, restaurant_id: str, table_id: str, total: float, payment_method: str
    ) -> CompletionResult: ...


class HttpOrderCompletionService:
    """Completes table orders through the order engine HTTP API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        api_key: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or settings.order_engine_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.order_engine_api_key
        self.http_client = http_client or httpx.AsyncClient(
            timeout=timeout or settings.order_engine_timeout_seconds
        )

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def complete_order(
        self, restaurant_id: str, table_id: str, total: float, payment_method: str
    ) -> CompletionResult:
        url = f"{self.base_url}/restaurants/{restaurant_id}/tables/{table_id}/complete"
        logger.info(
            f"Completing order for restaurant {restaurant_id} table {table_id} "
            f"(total={total}, payment_method={payment_method})"
        )

        try:
            response = await self.http_client.post(
                url,
                json={"total": total, "paymentMethod": payment_method},
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.error(f"Order engine unreachable at {url}: {e}")
            return CompletionResult(success=False, detail=str(e))

        try:
            body = response.json()
        except ValueError:
            body = response.text

        if response.status_code >= 400:
            return CompletionResult(
                success=False, status_code=response.status_code, detail=body
            )

        return CompletionResult(success=True, status_code=response.status_code, detail=body)

    async def aclose(self):
        await self.http_client.aclose()
