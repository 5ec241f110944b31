import pytest
from unittest.mock import AsyncMock, Mock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from core.database import Base, get_db
from modules.orders.models.order_models import Order
from modules.orders.schemas.split_bill_schemas import CompletionResult
from .factories import OrderFactory

SQLALCHEMY_DATABASE_URL = "sqlite://"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine
)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    OrderFactory._meta.sqlalchemy_session = db
    try:
        yield db
    finally:
        OrderFactory._meta.sqlalchemy_session = None
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def completion_client():
    """Order engine client that always succeeds"""
    client = Mock()
    client.complete_order = AsyncMock(
        return_value=CompletionResult(success=True, status_code=200, detail={"ok": True})
    )
    return client


@pytest.fixture
def sample_order(db_session) -> Order:
    """An open order with one item of quantity 9 at price 10"""
    return OrderFactory(
        id="order-123",
        restaurant_id="rest-1",
        table_id="table-7",
        json_data={
            "items": {
                "item-1": {
                    "name": "Margherita",
                    "customizations": [
                        {"name": "Regular", "qty": 9, "price": 10},
                    ],
                },
            }
        },
    )


@pytest.fixture
def client(db_session, completion_client):
    """Create a test client with database and order engine overrides."""
    from app.main import app
    from modules.orders.routes.split_bill_routes import get_order_completion_client

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_order_completion_client] = lambda: completion_client
    yield TestClient(app)
    app.dependency_overrides.clear()
